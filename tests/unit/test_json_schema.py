import json

from scripts.generate_json_schema import collect_models, generate_schema, main


def test_schema_covers_configs_and_commands() -> None:
    schema = generate_schema(collect_models())
    definitions = schema["definitions"]
    assert set(definitions) == {"SimpleConfig", "QuotingConfig", "PlaceOrder", "CancelAll"}
    simple = definitions["SimpleConfig"]
    assert {"strategy_id", "environment", "market", "buy_price", "sell_price", "order_size"} <= set(
        simple["properties"]
    )
    assert "order_size" in definitions["QuotingConfig"]["required"]


def test_main_writes_file(tmp_path, capsys) -> None:
    out = tmp_path / "schemas.json"
    main(["--out", str(out)])
    written = json.loads(out.read_text(encoding="utf-8"))
    assert "SimpleConfig" in written["definitions"]
    assert "Schema written to" in capsys.readouterr().out

"""
generate_json_schema
====================

This script exports JSON Schema definitions for the strategy config
models and the order command models.  It uses Pydantic's built-in JSON
schema generator, so editors and config tooling can validate
``strategy`` sections before a strategy is ever started.  Semantic rules
(``buy_price < sell_price``, positive sizes) are checked by the
strategies themselves and are not part of the schema.

Usage
-----

Run this script from the project root and specify an output file:

.. code-block:: bash

    python scripts/generate_json_schema.py --out schemas.json

If no output file is provided, the schema will be printed to stdout.
"""

from __future__ import annotations

import argparse
import json
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel

from botkit.models import CancelAll, PlaceOrder
from botkit.strategies import STRATEGY_TYPES


def collect_models() -> Dict[str, Type[BaseModel]]:
    models: Dict[str, Type[BaseModel]] = {
        config_cls.__name__: config_cls for config_cls, _ in STRATEGY_TYPES.values()
    }
    models["PlaceOrder"] = PlaceOrder
    models["CancelAll"] = CancelAll
    return models


def generate_schema(models: Dict[str, Type[BaseModel]]) -> Dict[str, Any]:
    schema: Dict[str, Any] = {
        "$schema": "http://json-schema.org/draft-07/schema#",
        "definitions": {},
    }
    for name, model in models.items():
        # Pydantic returns schema with title at top level; we normalize under definitions
        schema["definitions"][name] = model.model_json_schema()
    return schema


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Generate JSON schemas for strategy configs and commands.")
    ap.add_argument("--out", help="Output file path. Defaults to stdout if omitted.")
    return ap.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    schema = generate_schema(collect_models())
    if args.out:
        with open(args.out, "w", encoding="utf-8") as f:
            json.dump(schema, f, indent=2)
        print(f"Schema written to {args.out}")
    else:
        print(json.dumps(schema, indent=2))


if __name__ == "__main__":
    main()

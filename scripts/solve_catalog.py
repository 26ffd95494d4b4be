#!/usr/bin/env python3
"""CLI entrypoint for a one-off selection solve.

Usage examples:
    python scripts/solve_catalog.py --catalog inventory.json --target 1250.00
    python scripts/solve_catalog.py --catalog inventory.json --gross-total 1500 --invoice-date 2026-03-01

The catalog file holds a JSON list of items: {"id", "name", "unitPrice", "quantity", "purchaseDate"?}.

Flags:
    --catalog PATH        JSON catalog file.
    --target AMOUNT       Net target; runs a plain selection.
    --gross-total AMOUNT  Tax-inclusive total; runs the invoice fill job instead.
    --invoice-date DATE   Invoice date (YYYY-MM-DD) for --gross-total; defaults to today.
    --vat-rate RATE       VAT rate for --gross-total; defaults to INVOICE_VAT_RATE.
    --log-level LEVEL     Logging level (INFO, DEBUG, WARNING, ERROR).

Exit codes:
    0 on selected/empty, 2 on a failed outcome, 1 on unexpected exception.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path

from assortment.config import settings, setup_json_logging
from assortment.errors import InvalidInputError
from assortment.jobs.invoice_fill_job import run_invoice_fill
from assortment.services.selection_dispatcher import SelectionDispatcher


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Select catalog units closest to a target amount.")
    parser.add_argument("--catalog", type=Path, required=True, help="Path to a JSON catalog file.")
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument("--target", type=str, default=None, help="Net target amount.")
    mode.add_argument("--gross-total", type=str, default=None, help="Tax-inclusive invoice total.")
    parser.add_argument(
        "--invoice-date",
        type=date.fromisoformat,
        default=None,
        help="Invoice date (YYYY-MM-DD); items purchased later are ignored.",
    )
    parser.add_argument("--vat-rate", type=float, default=None, help="VAT rate, e.g. 0.2.")
    parser.add_argument("--log-level", type=str, default="WARNING", help="Logging level (e.g. INFO, DEBUG).")
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    setup_json_logging(getattr(logging, args.log_level.upper(), logging.WARNING))
    logger = logging.getLogger("assortment.cli")

    try:
        with args.catalog.open("r", encoding="utf-8") as f:
            catalog = json.load(f)
        if not isinstance(catalog, list):
            raise ValueError("Catalog file must contain a JSON list of items.")

        if args.gross_total is not None:
            draft = run_invoice_fill(
                inventory=catalog,
                gross_total=args.gross_total,
                invoice_date=args.invoice_date or date.today(),
                vat_rate=args.vat_rate,
            )
            print(draft.model_dump_json(indent=2))
            outcome = draft.outcome
        else:
            outcome = SelectionDispatcher.from_settings(settings).solve_sync(catalog, args.target)
            print(outcome.model_dump_json(indent=2))
    except KeyboardInterrupt:
        logger.warning("cli.interrupted")
        return 130
    except InvalidInputError as exc:
        logger.error("cli.invalid_input", extra={"reason": str(exc)})
        return 2
    except Exception:
        logger.exception("cli.error")
        return 1

    return 2 if outcome.status == "failed" else 0


if __name__ == "__main__":
    sys.exit(main())

"""Validate cached customer and supplier balances against their history.

Usage:
    python -m shopledger.scripts.validate_balances [--json]

Exits 0 when every balance matches and no integrity defects were found,
1 otherwise.
"""

import argparse
import asyncio
import sys

from shopledger.core.config import get_settings
from shopledger.core.db import AsyncSessionLocal
from shopledger.core.errors import AppError
from shopledger.core.logging import configure_logging, get_logger, new_run_id, set_request_id
from shopledger.models.reconciliation_schemas import BalanceReport
from shopledger.services.reconciler import Reconciler
from shopledger.store.base import DocumentStore
from shopledger.store.sql import SqlStore

logger = get_logger(__name__)


def print_report(report: BalanceReport, currency_symbol: str = "₹") -> None:
    """Human-readable report on stdout."""
    summary = report.summary
    print("\n" + "=" * 50)
    print("Balance validation")
    print("=" * 50 + "\n")
    print(f"   👥 Customers: {summary.total_customers}")
    print(f"   🚚 Suppliers: {summary.total_suppliers}")
    print(f"   🧾 Orders: {summary.total_orders}")
    print(f"   💸 Transactions: {summary.total_transactions}\n")

    for disc in summary.discrepancies.customers:
        print(
            f"⚠️  Customer {disc.name}: calculated {currency_symbol}{disc.calculated:.2f}, "
            f"stored {currency_symbol}{disc.actual:.2f}"
        )
    for disc in summary.discrepancies.suppliers:
        print(
            f"⚠️  Supplier {disc.name}: calculated {currency_symbol}{disc.calculated:.2f}, "
            f"stored {currency_symbol}{disc.actual:.2f}"
        )

    if report.is_valid:
        print("✅ All balances are consistent\n")
        return

    print(f"\n❌ {len(report.errors)} problem(s) found:")
    for error in report.errors:
        print(f"   - {error}")
    print()


async def run_validation(
    store: DocumentStore, as_json: bool = False, currency_symbol: str = "₹"
) -> int:
    """Validate the store, print the outcome and return the exit code."""
    report = await Reconciler(store, currency_symbol=currency_symbol).validate()
    if as_json:
        print(report.model_dump_json(indent=2))
    else:
        print_report(report, currency_symbol)
    return 0 if report.is_valid else 1


async def main(as_json: bool = False) -> int:
    settings = get_settings()
    async with AsyncSessionLocal() as db:
        return await run_validation(SqlStore(db), as_json, settings.currency_symbol)


def cli(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Validate shop balances against order history")
    parser.add_argument("--json", action="store_true", help="print the full report as JSON")
    args = parser.parse_args(argv)

    configure_logging(get_settings().log_level)
    set_request_id(new_run_id("validate"))

    try:
        exit_code = asyncio.run(main(as_json=args.json))
    except KeyboardInterrupt:
        print("\n\n❌ Cancelled\n")
        sys.exit(1)
    except AppError as e:
        logger.error("validate_balances.failed", code=e.code, error=e.message)
        print(f"\n❌ Error: {e.message}\n")
        sys.exit(1)
    except Exception as e:
        logger.exception("validate_balances.failed", error=str(e))
        print(f"\n❌ Unexpected error: {e}\n")
        sys.exit(1)
    sys.exit(exit_code)


if __name__ == "__main__":
    cli()

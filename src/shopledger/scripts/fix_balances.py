"""Overwrite discrepant customer and supplier balances with recalculated values.

Usage:
    python -m shopledger.scripts.fix_balances [--delete-orphans] [--yes]

Stop taking orders and payments first: anything recorded while this runs
can be overwritten with a stale balance.
"""

import argparse
import asyncio
import sys
from collections.abc import Callable

from shopledger.core.config import get_settings
from shopledger.core.db import AsyncSessionLocal
from shopledger.core.errors import AppError
from shopledger.core.logging import configure_logging, get_logger, new_run_id, set_request_id
from shopledger.services.reconciler import Reconciler
from shopledger.store.base import DocumentStore
from shopledger.store.sql import SqlStore

logger = get_logger(__name__)

CONCURRENCY_WARNING = (
    "⚠️  Balances are recalculated from a snapshot. Orders or payments recorded "
    "while this runs will be overwritten. Pause the shop before continuing."
)


async def run_fix(
    store: DocumentStore,
    delete_orphans: bool = False,
    confirm: Callable[[], bool] | None = None,
    currency_symbol: str = "₹",
) -> int:
    """
    Fix balances and optionally purge orphans. Returns the exit code.

    confirm is asked before any deletion; None means already confirmed.
    """
    print(CONCURRENCY_WARNING + "\n")
    reconciler = Reconciler(store, currency_symbol=currency_symbol)

    result = await reconciler.fix_discrepancies()
    for correction in result.customers:
        print(
            f"🔧 Customer {correction.name}: "
            f"{currency_symbol}{correction.previous:.2f} -> {currency_symbol}{correction.corrected:.2f}"
        )
    for correction in result.suppliers:
        print(
            f"🔧 Supplier {correction.name}: "
            f"{currency_symbol}{correction.previous:.2f} -> {currency_symbol}{correction.corrected:.2f}"
        )
    print(f"\n✅ Fixed {result.total_fixed} balance(s)")

    summary = result.report.summary
    orphan_count = len(summary.orphaned_orders) + len(summary.orphaned_transactions)
    if orphan_count and not delete_orphans:
        print(f"ℹ️  {orphan_count} orphaned record(s) left in place (use --delete-orphans)")

    if delete_orphans and orphan_count:
        if confirm is not None and not confirm():
            print("❌ Orphan deletion cancelled")
            return 1
        purged = await reconciler.purge_orphans(confirm=True)
        print(
            f"🗑️  Deleted {len(purged.deleted_orders)} order(s) and "
            f"{len(purged.deleted_transactions)} transaction(s)"
        )

    return 0


def prompt_for_delete() -> bool:
    answer = input("Type 'delete' to permanently remove orphaned records: ")
    return answer.strip() == "delete"


async def main(delete_orphans: bool, assume_yes: bool) -> int:
    settings = get_settings()
    async with AsyncSessionLocal() as db:
        return await run_fix(
            SqlStore(db),
            delete_orphans=delete_orphans,
            confirm=None if assume_yes else prompt_for_delete,
            currency_symbol=settings.currency_symbol,
        )


def cli(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Fix shop balances from order history")
    parser.add_argument(
        "--delete-orphans",
        action="store_true",
        help="also delete orders and transactions whose customer or supplier is gone",
    )
    parser.add_argument("--yes", action="store_true", help="skip the deletion prompt")
    args = parser.parse_args(argv)

    configure_logging(get_settings().log_level)
    set_request_id(new_run_id("fix"))

    try:
        exit_code = asyncio.run(main(args.delete_orphans, args.yes))
    except KeyboardInterrupt:
        print("\n\n❌ Cancelled\n")
        sys.exit(1)
    except AppError as e:
        logger.error("fix_balances.failed", code=e.code, error=e.message)
        print(f"\n❌ Error: {e.message}\n")
        sys.exit(1)
    except Exception as e:
        logger.exception("fix_balances.failed", error=str(e))
        print(f"\n❌ Unexpected error: {e}\n")
        sys.exit(1)
    sys.exit(exit_code)


if __name__ == "__main__":
    cli()

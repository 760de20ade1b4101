"""Balance reconciliation API endpoints."""

from fastapi import APIRouter, Depends, Query

from shopledger.api.deps import get_reconciler
from shopledger.models.reconciliation_schemas import BalanceReport, FixResult, PurgeResult
from shopledger.services.reconciler import Reconciler

router = APIRouter(prefix="/reconciliation", tags=["reconciliation"])


@router.get("/report", response_model=BalanceReport)
async def balance_report(reconciler: Reconciler = Depends(get_reconciler)):
    """Compare every cached balance with its order and transaction history."""
    return await reconciler.validate()


@router.post("/fix", response_model=FixResult)
async def fix_balances(reconciler: Reconciler = Depends(get_reconciler)):
    """
    Overwrite discrepant balances with the recalculated values.

    Not safe while orders or payments are being recorded: anything written
    between the read and the fix is overwritten.
    """
    return await reconciler.fix_discrepancies()


@router.post("/orphans/purge", response_model=PurgeResult)
async def purge_orphans(
    confirm: bool = Query(False, description="Must be true; deletion is permanent"),
    reconciler: Reconciler = Depends(get_reconciler),
):
    """Delete orders and transactions that point at missing customers or suppliers."""
    return await reconciler.purge_orphans(confirm=confirm)

"""Pydantic schemas for balance reconciliation reports."""

from decimal import Decimal

from pydantic import BaseModel, Field, computed_field


class BalanceDiscrepancy(BaseModel):
    """
    One customer or supplier whose stored balance disagrees with its history.

    calculated is the raw projection (may be negative after an overpayment),
    expected is what the stored balance should hold once floored at zero, and
    difference is actual minus expected.
    """

    id: str
    name: str
    calculated: Decimal
    expected: Decimal
    actual: Decimal
    difference: Decimal


class DiscrepancySet(BaseModel):
    customers: list[BalanceDiscrepancy] = Field(default_factory=list)
    suppliers: list[BalanceDiscrepancy] = Field(default_factory=list)


class DuplicateIds(BaseModel):
    """Ids seen more than once per collection, one entry per repeat occurrence."""

    customers: list[str] = Field(default_factory=list)
    suppliers: list[str] = Field(default_factory=list)
    orders: list[str] = Field(default_factory=list)
    transactions: list[str] = Field(default_factory=list)


class ReportSummary(BaseModel):
    total_customers: int
    total_suppliers: int
    total_orders: int
    total_transactions: int
    calculated_customer_balances: dict[str, Decimal]
    calculated_supplier_balances: dict[str, Decimal]
    actual_customer_balances: dict[str, Decimal]
    actual_supplier_balances: dict[str, Decimal]
    discrepancies: DiscrepancySet
    orphaned_orders: list[str] = Field(default_factory=list)
    orphaned_transactions: list[str] = Field(default_factory=list)
    duplicate_ids: DuplicateIds = Field(default_factory=DuplicateIds)


class BalanceReport(BaseModel):
    """
    Result of a validation run.

    errors holds one human-readable line per balance discrepancy, orphaned
    order, orphaned transaction and repeated id. warnings is reserved and
    currently always empty.
    """

    is_valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    summary: ReportSummary


class BalanceCorrection(BaseModel):
    """A stored balance overwritten by fix_discrepancies."""

    id: str
    name: str
    previous: Decimal
    corrected: Decimal


class FixResult(BaseModel):
    report: BalanceReport
    customers: list[BalanceCorrection] = Field(default_factory=list)
    suppliers: list[BalanceCorrection] = Field(default_factory=list)

    @computed_field
    @property
    def total_fixed(self) -> int:
        return len(self.customers) + len(self.suppliers)


class PurgeResult(BaseModel):
    """Ids removed by purge_orphans."""

    deleted_orders: list[str] = Field(default_factory=list)
    deleted_transactions: list[str] = Field(default_factory=list)

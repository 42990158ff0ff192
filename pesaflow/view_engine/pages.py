# This file declares the page profiles for every tabular dashboard page.
# It exists so each page's columns, tabs, default sort, and export layout are explicit data.
# Accessor tables are written out per record shape instead of walking record fields at runtime.
# Profiles validate their own column references at import time so wiring mistakes fail fast.

from __future__ import annotations

import numbers
from dataclasses import dataclass

from pesaflow.view_engine.accessors import (
    AccessorTable,
    FieldAccessor,
    FieldKind,
    computed_field,
    currency_field,
    nested_field,
    number_field,
    status_field,
    text_field,
    timestamp_field,
)
from pesaflow.view_engine.filters import ALL_TAB
from pesaflow.view_engine.records import Record
from pesaflow.view_engine.sorting import SortDirection, SortSpec


@dataclass(frozen=True)
class PageProfile:
    name: str
    report_title: str
    accessors: AccessorTable
    default_sort: SortSpec
    page_size: int | None
    search_columns: tuple[str, ...]
    export_columns: tuple[str, ...]
    key_field: str = "id"
    tab_column: str | None = None
    tabs: tuple[str, ...] = (ALL_TAB,)
    default_tab: str = ALL_TAB
    date_column: str | None = None
    scope_column: str | None = None
    file_title: str | None = None

    def __post_init__(self) -> None:
        if self.page_size is not None and self.page_size < 1:
            raise ValueError(f"Page '{self.name}' page_size must be >= 1")
        if ALL_TAB not in self.tabs:
            raise ValueError(f"Page '{self.name}' tabs must include '{ALL_TAB}'")
        if self.default_tab not in self.tabs:
            raise ValueError(
                f"Page '{self.name}' default_tab '{self.default_tab}' is not one of its tabs"
            )
        referenced = [
            self.default_sort.key,
            *self.search_columns,
            *self.export_columns,
            *(
                column
                for column in (self.tab_column, self.date_column, self.scope_column)
                if column
            ),
        ]
        self.accessors.select(referenced)

    def accessor(self, column: str) -> FieldAccessor:
        return self.accessors[column]

    @property
    def sortable_columns(self) -> tuple[str, ...]:
        return tuple(self.accessors)

    @property
    def search_accessors(self) -> tuple[FieldAccessor, ...]:
        return self.accessors.select(self.search_columns)

    @property
    def export_accessors(self) -> tuple[FieldAccessor, ...]:
        return self.accessors.select(self.export_columns)

    def optional_accessor(self, column: str | None) -> FieldAccessor | None:
        return None if column is None else self.accessors[column]


GROUP_TRANSACTIONS = PageProfile(
    name="group_transactions",
    report_title="PesaFlow Group Transactions",
    accessors=AccessorTable(
        [
            text_field("transactionId", "Transaction ID"),
            timestamp_field("date", "Date"),
            nested_field("memberName", "Member", source="member", fields=("name",)),
            text_field("memberId", "Member ID", path="member.id"),
            currency_field("amount", "Amount"),
            text_field("type", "Type"),
            text_field("paymentType", "Payment Type"),
            status_field("status", "Status"),
        ]
    ),
    default_sort=SortSpec("date", SortDirection.DESCENDING),
    page_size=8,
    search_columns=(
        "transactionId",
        "date",
        "memberName",
        "amount",
        "type",
        "paymentType",
        "status",
    ),
    export_columns=(
        "transactionId",
        "date",
        "memberName",
        "amount",
        "type",
        "paymentType",
        "status",
    ),
    tab_column="status",
    tabs=(ALL_TAB, "Completed", "Pending", "Failed"),
    date_column="date",
    scope_column="memberId",
)

LOAN_OVERVIEW = PageProfile(
    name="loans",
    report_title="Loan List Report",
    accessors=AccessorTable(
        [
            text_field("loanId", "Loan ID"),
            currency_field("amount", "Amount", currency_field="currency"),
            timestamp_field("borrowingDate", "Borrowing Date"),
            timestamp_field("repaymentDate", "Repayment Date"),
            currency_field("outstandingBalance", "Outstanding Balance", currency_field="currency"),
            status_field("status", "Status"),
        ]
    ),
    default_sort=SortSpec("borrowingDate", SortDirection.DESCENDING),
    page_size=6,
    search_columns=(
        "loanId",
        "amount",
        "borrowingDate",
        "repaymentDate",
        "outstandingBalance",
        "status",
    ),
    export_columns=(
        "loanId",
        "amount",
        "borrowingDate",
        "repaymentDate",
        "outstandingBalance",
        "status",
    ),
    tab_column="status",
    tabs=(ALL_TAB, "Approved", "Pending", "Overdue", "Completed"),
    date_column="borrowingDate",
)

LOAN_REPAYMENTS = PageProfile(
    name="loan_repayments",
    report_title="Loan Repayments Report",
    accessors=AccessorTable(
        [
            timestamp_field("repaymentDate", "Repayment Date"),
            text_field("clientName", "Name"),
            text_field("accountNumber", "Account"),
            text_field("paymentReference", "Payment Reference"),
            status_field("status", "Status"),
            currency_field("amount", "Amount", currency_field="currency"),
        ]
    ),
    default_sort=SortSpec("repaymentDate", SortDirection.DESCENDING),
    page_size=10,
    search_columns=("clientName", "accountNumber", "paymentReference", "status"),
    export_columns=(
        "repaymentDate",
        "clientName",
        "accountNumber",
        "paymentReference",
        "status",
        "amount",
    ),
    tab_column="status",
    tabs=(ALL_TAB, "Completed", "Pending", "Failed"),
    date_column="repaymentDate",
)

CONTRIBUTIONS = PageProfile(
    name="contributions",
    report_title="PesaFlow Contributions Report",
    accessors=AccessorTable(
        [
            text_field("contributionId", "Contribution ID"),
            timestamp_field("date", "Date"),
            text_field("memberName", "Member"),
            text_field("groupName", "Group Name"),
            currency_field("amount", "Amount"),
            text_field("type", "Type"),
            text_field("contributionType", "Contribution Type"),
            status_field("status", "Status"),
        ]
    ),
    default_sort=SortSpec("date", SortDirection.DESCENDING),
    page_size=8,
    search_columns=(
        "contributionId",
        "date",
        "memberName",
        "groupName",
        "amount",
        "type",
        "contributionType",
        "status",
    ),
    export_columns=(
        "contributionId",
        "date",
        "memberName",
        "groupName",
        "amount",
        "type",
        "contributionType",
        "status",
    ),
    tab_column="status",
    tabs=(ALL_TAB, "Completed", "Pending", "Cancelled"),
    date_column="date",
)

GROUP_SUMMARY = PageProfile(
    name="group_summary",
    report_title="PesaFlow Group Summary Report",
    accessors=AccessorTable(
        [
            text_field("memberId", "Member ID"),
            text_field("memberName", "Member Name"),
            currency_field("totalContributed", "Total Contributed"),
            currency_field("totalWithdrawn", "Total Withdrawn"),
            currency_field("netContribution", "Net Contribution"),
            number_field("transactionCount", "Transactions"),
        ]
    ),
    default_sort=SortSpec("netContribution", SortDirection.DESCENDING),
    page_size=8,
    search_columns=("memberName",),
    export_columns=(
        "memberName",
        "totalContributed",
        "totalWithdrawn",
        "netContribution",
        "transactionCount",
    ),
    key_field="memberId",
    scope_column="memberId",
    file_title="PesaFlow Summary Report",
)

GOAL_SUMMARY = PageProfile(
    name="goal_summary",
    report_title="Goal Summary Report",
    accessors=AccessorTable(
        [
            text_field("source", "Source"),
            currency_field("totalAmount", "Total Amount"),
            number_field("transactionCount", "Transaction Count"),
            currency_field("averageAmount", "Average Amount"),
            timestamp_field("lastTransactionDate", "Last Deposit"),
        ]
    ),
    default_sort=SortSpec("totalAmount", SortDirection.DESCENDING),
    page_size=8,
    search_columns=("source",),
    export_columns=(
        "source",
        "totalAmount",
        "transactionCount",
        "averageAmount",
        "lastTransactionDate",
    ),
    key_field="source",
    date_column="lastTransactionDate",
)


GOAL_CURRENT = "Current"
GOAL_ACHIEVED = "Achieved"


def _goal_amounts(record: Record) -> tuple[float, float] | None:
    current = record.get("currentAmount")
    target = record.get("targetAmount")
    if not all(
        isinstance(value, numbers.Real) and not isinstance(value, bool)
        for value in (current, target)
    ):
        return None
    return float(current), float(target)


def goal_progress(record: Record) -> float | None:
    """Percent of the target saved so far; 0 when the goal has no positive target."""

    amounts = _goal_amounts(record)
    if amounts is None:
        return None
    current, target = amounts
    if target <= 0:
        return 0.0
    return round(current / target * 100, 2)


def goal_status(record: Record) -> str | None:
    amounts = _goal_amounts(record)
    if amounts is None:
        return None
    current, target = amounts
    return GOAL_CURRENT if current < target else GOAL_ACHIEVED


GOALS = PageProfile(
    name="goals",
    report_title="Savings Goals Report",
    accessors=AccessorTable(
        [
            text_field("name", "Goal Name"),
            currency_field("targetAmount", "Target Amount"),
            currency_field("currentAmount", "Saved"),
            computed_field(
                "progress", "Progress (%)", kind=FieldKind.NUMBER, compute=goal_progress
            ),
            computed_field("goalStatus", "Status", kind=FieldKind.STATUS, compute=goal_status),
            timestamp_field("deadline", "Deadline"),
        ]
    ),
    default_sort=SortSpec("progress", SortDirection.DESCENDING),
    page_size=5,
    search_columns=("name",),
    export_columns=(
        "name",
        "targetAmount",
        "currentAmount",
        "progress",
        "goalStatus",
        "deadline",
    ),
    tab_column="goalStatus",
    tabs=(ALL_TAB, GOAL_CURRENT, GOAL_ACHIEVED),
    default_tab=GOAL_CURRENT,
    date_column="deadline",
)

MEMBERS = PageProfile(
    name="members",
    report_title="PesaFlow Members Report",
    accessors=AccessorTable(
        [
            text_field("memberId", "Member ID"),
            timestamp_field("joinDate", "Join Date"),
            text_field("memberName", "Member Name"),
            text_field("groupName", "Group Name"),
            currency_field("totalContribution", "Total Contribution"),
            status_field("status", "Status"),
        ]
    ),
    default_sort=SortSpec("joinDate", SortDirection.DESCENDING),
    page_size=8,
    search_columns=("memberId", "memberName", "groupName", "status"),
    export_columns=(
        "memberId",
        "joinDate",
        "memberName",
        "groupName",
        "totalContribution",
        "status",
    ),
    tab_column="status",
    tabs=(ALL_TAB, "Active", "Inactive", "Suspended"),
    date_column="joinDate",
)

PAGE_PROFILES: dict[str, PageProfile] = {
    profile.name: profile
    for profile in (
        GROUP_TRANSACTIONS,
        LOAN_OVERVIEW,
        LOAN_REPAYMENTS,
        CONTRIBUTIONS,
        GROUP_SUMMARY,
        GOAL_SUMMARY,
        GOALS,
        MEMBERS,
    )
}


def get_page_profile(name: str) -> PageProfile:
    try:
        return PAGE_PROFILES[name]
    except KeyError:
        supported = ", ".join(sorted(PAGE_PROFILES))
        raise ValueError(f"Unsupported page '{name}'. Supported pages: {supported}") from None

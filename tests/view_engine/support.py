# This file holds record builders and config fixtures shared by the view engine tests.
# It exists so each test module works from the same small, readable record sets.

from __future__ import annotations

from typing import Any

from pesaflow.view_engine.accessors import AccessorTable, number_field, status_field, text_field
from pesaflow.view_engine.engine_config import EngineConfig
from pesaflow.view_engine.filters import ALL_TAB
from pesaflow.view_engine.pages import PageProfile
from pesaflow.view_engine.records import RecordStore
from pesaflow.view_engine.sorting import SortDirection, SortSpec


def build_test_config(**overrides: Any) -> EngineConfig:
    values: dict[str, Any] = {
        "default_page_size": 10,
        "max_page_size": 100,
        "page_size_options": (5, 10, 20),
        "currency_code": "TZS",
        "export_max_workers": 1,
        "include_time_in_exports": False,
    }
    values.update(overrides)
    return EngineConfig(**values)


SIMPLE_PROFILE = PageProfile(
    name="simple",
    report_title="Simple Report",
    accessors=AccessorTable(
        [
            text_field("id", "ID"),
            status_field("status", "Status"),
            number_field("amount", "Amount"),
        ]
    ),
    default_sort=SortSpec("id", SortDirection.ASCENDING),
    page_size=10,
    search_columns=("id", "status"),
    export_columns=("id", "status", "amount"),
    tab_column="status",
    tabs=(ALL_TAB, "Completed", "Pending"),
)


def scenario_records() -> list[dict[str, Any]]:
    return [
        {"id": 1, "status": "Completed", "amount": 100},
        {"id": 2, "status": "Pending", "amount": 50},
        {"id": 3, "status": "Completed", "amount": 75},
    ]


def group_transactions() -> list[dict[str, Any]]:
    return [
        {
            "id": "gt-1",
            "transactionId": "TXN-1001",
            "member": {"id": "m-1", "name": "Amina Said", "avatar": "https://cdn.example/zeta.png"},
            "date": "2024-03-01T09:30:00Z",
            "paymentType": "Contribution",
            "amount": 150000,
            "type": "Income",
            "status": "Completed",
        },
        {
            "id": "gt-2",
            "transactionId": "TXN-1002",
            "member": {"id": "m-2", "name": "Baraka Mushi", "avatar": ""},
            "date": "2024-03-05T14:00:00Z",
            "paymentType": "Withdrawal",
            "amount": 40000,
            "type": "Outcome",
            "status": "Pending",
        },
        {
            "id": "gt-3",
            "transactionId": "TXN-1003",
            "member": {"id": "m-1", "name": "Amina Said", "avatar": ""},
            "date": "2024-03-31T23:15:00Z",
            "paymentType": "Fee",
            "amount": 2500.5,
            "type": "Outcome",
            "status": "Failed",
        },
        {
            "id": "gt-4",
            "transactionId": "TXN-1004",
            "member": {"id": "m-3", "name": "Chausiku Ally", "avatar": ""},
            "date": "not-a-date",
            "paymentType": "Interest",
            "amount": 1200,
            "type": "Income",
            "status": "Completed",
        },
    ]


def numbered_records(count: int) -> list[dict[str, Any]]:
    return [
        {"id": f"r{index:03d}", "status": "Completed" if index % 2 else "Pending", "amount": index}
        for index in range(1, count + 1)
    ]


def simple_store(records: list[dict[str, Any]] | None = None) -> RecordStore:
    return RecordStore(records if records is not None else scenario_records())

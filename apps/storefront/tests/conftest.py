import uuid
from typing import Any, Dict, List, Optional

import pytest

from apps.storefront.services.loyalty.loyalty_repository import LoyaltyRepository
from apps.storefront.services.loyalty.loyalty_service import LoyaltyService


class FakeStore:
    """In-memory stand-in for RestStore supporting eq. filters and column ordering."""

    def __init__(self, rows: Optional[Dict[str, List[Dict[str, Any]]]] = None):
        self.tables: Dict[str, List[Dict[str, Any]]] = {k: list(v) for k, v in (rows or {}).items()}
        self.selects: List[Dict[str, Any]] = []
        self.inserts: List[Dict[str, Any]] = []

    def select(self, table, filters=None, order=None, columns="*"):
        self.selects.append({"table": table, "filters": filters, "order": order})
        rows = list(self.tables.get(table, []))
        for key, expr in (filters or {}).items():
            op, _, value = expr.partition(".")
            assert op == "eq", f"unsupported filter {expr}"
            rows = [r for r in rows if str(r.get(key)) == value]
        if order:
            column, _, direction = order.partition(".")
            rows = sorted(rows, key=lambda r: r.get(column) or "", reverse=(direction == "desc"))
        return [dict(r) for r in rows]

    def insert(self, table, record):
        row = dict(record)
        row.setdefault("id", str(uuid.uuid4()))
        self.tables.setdefault(table, []).append(row)
        self.inserts.append({"table": table, "record": dict(record)})
        return dict(row)


class FailingStore:
    def select(self, table, filters=None, order=None, columns="*"):
        from apps.storefront.db import StoreError

        raise StoreError("Store get failed (loyalty_transactions): 503 unavailable", table=table, status_code=503)

    def insert(self, table, record):
        from apps.storefront.db import StoreError

        raise StoreError("Store post failed (loyalty_transactions): 503 unavailable", table=table, status_code=503)


def tx_row(customer_id, points, transaction_type, created_at, **extra):
    row = {
        "id": str(uuid.uuid4()),
        "customer_id": customer_id,
        "points": points,
        "transaction_type": transaction_type,
        "description": extra.pop("description", None),
        "created_at": created_at,
    }
    row.update(extra)
    return row


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def service(store):
    return LoyaltyService(LoyaltyRepository(store))

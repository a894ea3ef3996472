"""
Loyalty Repository (PostgREST adapter)
======================================

DB-facing adapter for the points ledger.

Expected table:
public.loyalty_transactions
   - id uuid primary key default gen_random_uuid()
   - customer_id text not null
   - points int not null
   - transaction_type text not null  -- earn | redeem | bonus
   - description text null
   - order_id text null
   - created_at timestamptz default now()

Store errors are not caught here.
"""

from __future__ import annotations

from typing import Any, List, Optional

from .points_ledger import LoyaltyTransaction


class LoyaltyRepository:
    def __init__(self, store: Any, *, table_transactions: str = "loyalty_transactions") -> None:
        self.store = store
        self.table_transactions = table_transactions

    def list_transactions(self, customer_id: str, *, newest_first: bool = False) -> List[LoyaltyTransaction]:
        order: Optional[str] = "created_at.desc" if newest_first else None
        rows = self.store.select(
            self.table_transactions,
            filters={"customer_id": f"eq.{customer_id}"},
            order=order,
        )
        return [LoyaltyTransaction.from_row(r) for r in (rows or []) if isinstance(r, dict)]

    def append_transaction(self, transaction: LoyaltyTransaction) -> LoyaltyTransaction:
        row = self.store.insert(self.table_transactions, transaction.to_row())
        if not isinstance(row, dict):
            return transaction
        return LoyaltyTransaction.from_row(row)

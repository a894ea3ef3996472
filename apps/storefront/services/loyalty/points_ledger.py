"""
Points Ledger
=============

Purpose:
- Immutable transaction record as stored in ``loyalty_transactions``.
- Derived customer snapshot (balance, lifetime points, tier).
- Pure reduction of a transaction sequence into that snapshot.

Design:
- The ledger is append-only. Rows are never updated or deleted.
- The balance is never stored; it is folded from the full history on every
  read, so it always agrees with the ledger.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Literal, Optional

from .tier_calculator import tier_of

TransactionType = Literal["earn", "redeem", "bonus"]


def now_utc_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class LoyaltyTransaction:
    """
    points:
        + positive for earn / bonus
        + negative for redeem
    """
    customer_id: str
    points: int
    transaction_type: TransactionType
    description: Optional[str] = None
    order_id: Optional[str] = None
    created_at: Optional[str] = None
    id: Optional[str] = None

    def to_row(self) -> Dict[str, Any]:
        row: Dict[str, Any] = {
            "customer_id": self.customer_id,
            "points": int(self.points),
            "transaction_type": self.transaction_type,
            "description": self.description,
            "created_at": self.created_at,
        }
        if self.order_id is not None:
            row["order_id"] = self.order_id
        if self.id is not None:
            row["id"] = self.id
        return row

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "customer_id": self.customer_id,
            "points": int(self.points),
            "transaction_type": self.transaction_type,
            "description": self.description,
            "order_id": self.order_id,
            "created_at": self.created_at,
        }

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "LoyaltyTransaction":
        return cls(
            customer_id=str(row["customer_id"]),
            points=int(row.get("points", 0)),
            transaction_type=str(row.get("transaction_type")),  # type: ignore[arg-type]
            description=row.get("description"),
            order_id=(str(row["order_id"]) if row.get("order_id") is not None else None),
            created_at=(str(row["created_at"]) if row.get("created_at") else None),
            id=(str(row["id"]) if row.get("id") is not None else None),
        )


@dataclass(frozen=True)
class CustomerLoyalty:
    customer_id: str
    total_points: int
    tier: str
    lifetime_points: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "customer_id": self.customer_id,
            "total_points": int(self.total_points),
            "tier": self.tier,
            "lifetime_points": int(self.lifetime_points),
        }


def fold_transactions(customer_id: str, transactions: Iterable[LoyaltyTransaction]) -> CustomerLoyalty:
    """
    Balance is the sum of every delta; lifetime points only count positive
    deltas. Tier follows the current balance.
    """
    total = 0
    lifetime = 0
    for t in transactions:
        total += int(t.points)
        if t.points > 0:
            lifetime += int(t.points)

    return CustomerLoyalty(
        customer_id=customer_id,
        total_points=total,
        tier=tier_of(total),
        lifetime_points=lifetime,
    )

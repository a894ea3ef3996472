from __future__ import annotations

from functools import lru_cache
from typing import Dict, Optional

from fastapi import Request
from supabase_auth import SyncGoTrueClient
from supabase_auth.errors import AuthError

from apps.storefront.config import settings
from apps.storefront.config.environment import load_environment
from apps.storefront.services.errors import LoyaltyError


def create_auth_client(base_url: str) -> SyncGoTrueClient:
    if not base_url:
        raise LoyaltyError("Auth not configured: NEON_AUTH_URL is empty", 500)
    return SyncGoTrueClient(
        url=base_url.rstrip("/"),
        auto_refresh_token=False,
        persist_session=False,
    )


@lru_cache(maxsize=1)
def get_auth_client() -> SyncGoTrueClient:
    env = load_environment()
    return create_auth_client(env.get("neon_auth_url") or "")


def resolve_user(token: str, client: Optional[SyncGoTrueClient] = None) -> Dict[str, str]:
    client = client or get_auth_client()
    try:
        res = client.get_user(token)
    except AuthError:
        raise LoyaltyError("Invalid or expired token", 401)

    user = res.user if res else None
    if not user or not user.id or not user.email:
        raise LoyaltyError("Unable to resolve user identity", 401)

    return {"id": user.id, "email": user.email}


def require_user(request: Request) -> Optional[Dict[str, str]]:
    """
    Route dependency. Only enforced when REQUIRE_AUTH=true.
    """
    if not settings.SETTINGS["require_auth"]:
        return None

    auth = request.headers.get("Authorization")
    if not auth or not auth.lower().startswith("bearer "):
        raise LoyaltyError("Missing or invalid Authorization header", 401)

    return resolve_user(auth.split(" ", 1)[1])

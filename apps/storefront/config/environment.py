"""
Environment configuration loader.

Reads the modules written by ``scripts/set_env.py``. When nothing has been
generated yet (local runs, tests) the same process variables the generator
reads are used instead.
"""

from __future__ import annotations

import importlib
import os
from typing import Any, Dict

GENERATED_PACKAGE = "apps.storefront.environments"


def _from_process_env(production: bool) -> Dict[str, Any]:
    return {
        "production": production,
        "neon_auth_url": os.getenv("NEON_AUTH_URL", ""),
        "database_url": os.getenv("DATABASE_URL", ""),
        "database_schema": os.getenv("DATABASE_SCHEMA") or "public",
    }


def load_environment(production: bool = False) -> Dict[str, Any]:
    module_name = "environment_prod" if production else "environment"
    try:
        module = importlib.import_module(f"{GENERATED_PACKAGE}.{module_name}")
    except ModuleNotFoundError:
        return _from_process_env(production)
    return dict(module.ENVIRONMENT)

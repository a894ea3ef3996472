"""
Generate environment configuration modules from process environment.

Reads NEON_AUTH_URL, DATABASE_URL and DATABASE_SCHEMA (a local .env file is
loaded first) and writes:

- environment.py       (production: False)
- environment_prod.py  (production: True)

Usage:
    storefront-set-env [--out-dir PATH]
"""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import load_dotenv

log = logging.getLogger("storefront.set_env")

DEFAULT_OUT_DIR = Path(__file__).resolve().parent.parent / "environments"

HEADER = "# This file is auto-generated from .env\n"


def read_env() -> Dict[str, str]:
    return {
        "neon_auth_url": os.getenv("NEON_AUTH_URL") or "",
        "database_url": os.getenv("DATABASE_URL") or "",
        "database_schema": os.getenv("DATABASE_SCHEMA") or "public",
    }


def render_environment(values: Dict[str, str], *, production: bool) -> str:
    lines = [
        HEADER,
        "ENVIRONMENT = {",
        f"    \"production\": {production!r},",
        f"    \"neon_auth_url\": {values['neon_auth_url']!r},",
        f"    \"database_url\": {values['database_url']!r},",
        f"    \"database_schema\": {values['database_schema']!r},",
        "}",
        "",
    ]
    return "\n".join(lines)


def generate(out_dir: Path, values: Optional[Dict[str, str]] = None) -> List[Path]:
    values = values if values is not None else read_env()
    out_dir.mkdir(parents=True, exist_ok=True)

    dev = out_dir / "environment.py"
    prod = out_dir / "environment_prod.py"
    dev.write_text(render_environment(values, production=False))
    prod.write_text(render_environment(values, production=True))
    return [dev, prod]


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Generate environment configuration modules.")
    parser.add_argument("--out-dir", type=Path, default=DEFAULT_OUT_DIR)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(message)s")
    load_dotenv()

    generate(args.out_dir)
    log.info("Environment files generated successfully")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

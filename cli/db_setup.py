"""
Database setup commands.

These commands wrap setup_database.py; the admin URL comes from
DATABASE_URL_ADMIN (or DATABASE_URL_APP) in the environment.

Usage:
    db-init          # Create tables
    db-init-demo     # Create tables and seed demo data
    db-reset         # Drop and recreate tables
    db-seed-demo     # Seed demo data
    db-verify        # Verify setup
"""

from __future__ import annotations

import sys
from pathlib import Path

from cli._runner import run

_SCRIPTS_DIR = Path(__file__).parent.parent / "scripts"
_SETUP_DB_SCRIPT = _SCRIPTS_DIR / "setup_database.py"


def _run_setup(*args: str) -> int:
    return run([sys.executable, str(_SETUP_DB_SCRIPT), *args])


def init() -> None:
    """Create tables."""
    sys.exit(_run_setup("init"))


def init_demo() -> None:
    """Create tables and seed demo data."""
    sys.exit(_run_setup("init", "--demo"))


def reset() -> None:
    """Drop and recreate tables, passing through --yes if given."""
    extra = ["--yes"] if any(arg in ("-y", "--yes") for arg in sys.argv[1:]) else []
    sys.exit(_run_setup(*extra, "reset"))


def seed_demo() -> None:
    """Seed demo data."""
    sys.exit(_run_setup("seed", "--demo"))


def verify() -> None:
    """Verify tables exist."""
    sys.exit(_run_setup("verify"))

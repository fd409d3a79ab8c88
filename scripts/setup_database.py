#!/usr/bin/env python3
"""
Team Balance API: Database Setup Script

Supports:
- init: First-time table creation (--demo adds demo data)
- reset: Drop and recreate this project's tables
- verify: Check DB connectivity and tables
- seed: Add demo data (--demo)

Usage:
    uv run db-init
    uv run db-init-demo
    uv run db-reset --yes
    uv run db-verify

Environment Variables:
- DATABASE_URL_ADMIN: Connection with table creation permissions (primary)
- DATABASE_URL_APP: Fallback
"""

from __future__ import annotations

import argparse
import os
import sys
from dataclasses import dataclass
from pathlib import Path

import psycopg
from psycopg.rows import dict_row

PROJECT_TABLES = ("teams", "websites", "transactions")


@dataclass
class SetupResult:
    """Result of a setup step."""

    success: bool
    message: str
    details: str | None = None


def to_libpq_url(url: str) -> str:
    """Strip SQLAlchemy driver suffixes so psycopg accepts the URL."""
    for driver in ("+asyncpg", "+psycopg"):
        url = url.replace(f"postgresql{driver}://", "postgresql://", 1)
    return url


class DatabaseSetup:
    """Handles database setup for the Team Balance API."""

    def __init__(self, admin_url: str):
        self.admin_url = to_libpq_url(admin_url)
        self.repo_root = Path(__file__).parent.parent

    def _load_sql_file(self, filename: str) -> str:
        """Load SQL file from db directory."""
        sql_path = self.repo_root / "db" / filename
        if not sql_path.exists():
            raise FileNotFoundError(f"SQL file not found: {sql_path}")
        return sql_path.read_text(encoding="utf-8")

    def _split_sql_statements(self, sql_content: str) -> list[str]:
        """Split SQL content on statement-terminating semicolons, dropping comments."""
        statements = []
        current: list[str] = []
        for line in sql_content.splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("--"):
                continue
            current.append(line)
            if stripped.endswith(";"):
                statements.append("\n".join(current))
                current = []
        if current:
            statements.append("\n".join(current))
        return statements

    def _execute_sql(
        self, conn: psycopg.Connection, sql_content: str, description: str
    ) -> SetupResult:
        """Execute SQL content with error handling."""
        try:
            statements = self._split_sql_statements(sql_content)
            for stmt in statements:
                conn.execute(stmt)
            conn.commit()
            return SetupResult(
                success=True,
                message=description,
                details=f"Executed {len(statements)} statements",
            )
        except psycopg.Error as e:
            conn.rollback()
            return SetupResult(
                success=False,
                message=description,
                details=f"{type(e).__name__}: {e}",
            )

    def _apply(self, conn: psycopg.Connection, filename: str, label: str) -> bool:
        print(f"  Applying {label}...")
        result = self._execute_sql(conn, self._load_sql_file(filename), f"{label} failed")
        if not result.success:
            print(f"ERROR: {result.details}")
            return False
        print(f"  {label.capitalize()} applied: {result.details}")
        return True

    def init(self, demo: bool = False) -> int:
        """Create tables, optionally with demo data."""
        print("Initializing database schema...")
        try:
            with psycopg.connect(self.admin_url, autocommit=False) as conn:
                if not self._apply(conn, "schema.sql", "schema"):
                    return 1
                if demo and not self._apply(conn, "seed_demo.sql", "demo data"):
                    return 1
        except psycopg.Error as e:
            print(f"ERROR: Database connection failed: {e}")
            return 1

        print("Database initialization complete.")
        return 0

    def reset(self, force: bool = False) -> int:
        """Drop and recreate this project's tables."""
        print("Resetting database tables...")

        if not force:
            response = input("This will destroy all teams, websites and transactions. Continue? [y/N]: ")
            if response.lower() != "y":
                print("Aborted.")
                return 1

        try:
            with psycopg.connect(self.admin_url, autocommit=False) as conn:
                # Reverse order for foreign keys
                for table in reversed(PROJECT_TABLES):
                    conn.execute(f"DROP TABLE IF EXISTS {table} CASCADE")
                conn.commit()
                print("  Tables dropped.")
                if not self._apply(conn, "schema.sql", "schema"):
                    return 1
        except psycopg.Error as e:
            print(f"ERROR: Database reset failed: {e}")
            return 1

        print("Database reset complete.")
        return 0

    def seed(self, demo: bool = False) -> int:
        """Apply seed data."""
        if not demo:
            print("  No demo data specified. Use --demo flag.")
            return 1

        print("Seeding database...")
        try:
            with psycopg.connect(self.admin_url, autocommit=False) as conn:
                if not self._apply(conn, "seed_demo.sql", "demo data"):
                    return 1
        except psycopg.Error as e:
            print(f"ERROR: Database seed failed: {e}")
            return 1

        print("Demo data seeded.")
        return 0

    def verify(self) -> int:
        """Verify connectivity and that every table exists."""
        print("Verifying database setup...")

        errors: list[str] = []
        try:
            with psycopg.connect(self.admin_url, autocommit=True, row_factory=dict_row) as conn:
                print("  [OK] Database connection")
                result = conn.execute(
                    """
                    SELECT table_name FROM information_schema.tables
                    WHERE table_schema = current_schema()
                    AND table_name = ANY(%s)
                    ORDER BY table_name
                    """,
                    (list(PROJECT_TABLES),),
                ).fetchall()
                tables = [row["table_name"] for row in result]
                missing = [t for t in PROJECT_TABLES if t not in tables]
                if missing:
                    errors.append(f"Missing tables: {missing}")
                else:
                    print(f"  [OK] Tables exist: {', '.join(tables)}")
        except psycopg.Error as e:
            errors.append(f"Database check failed: {e}")

        if errors:
            print("\nVerification FAILED:")
            for err in errors:
                print(f"  - {err}")
            return 1

        print("\nVerification PASSED.")
        return 0


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Team Balance API - Database Setup",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--admin-url", help="Admin database URL (overrides env var)")
    parser.add_argument("--yes", "-y", action="store_true", help="Skip confirmation prompts")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    init_parser = subparsers.add_parser("init", help="First-time setup")
    init_parser.add_argument("--demo", action="store_true", help="Include demo data")

    subparsers.add_parser("reset", help="Drop and recreate tables")

    seed_parser = subparsers.add_parser("seed", help="Apply seed data")
    seed_parser.add_argument("--demo", action="store_true", help="Include demo data")

    subparsers.add_parser("verify", help="Verify database setup")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    admin_url = args.admin_url or os.getenv("DATABASE_URL_ADMIN") or os.getenv("DATABASE_URL_APP")
    if not admin_url:
        print("ERROR: DATABASE_URL_ADMIN is required")
        print("Set it as environment variable or via --admin-url")
        return 2

    setup = DatabaseSetup(admin_url=admin_url)

    if args.command == "init":
        return setup.init(demo=args.demo)
    elif args.command == "reset":
        return setup.reset(force=args.yes)
    elif args.command == "seed":
        return setup.seed(demo=args.demo)
    elif args.command == "verify":
        return setup.verify()

    return 0


if __name__ == "__main__":
    sys.exit(main())

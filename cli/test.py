import sys

from cli._runner import run


def _pytest(*args: str) -> int:
    return run([sys.executable, "-m", "pytest", *args])


def main() -> None:
    """Run tests."""
    sys.exit(_pytest())


def test_v() -> None:
    """Run tests with verbose output."""
    sys.exit(_pytest("-v"))


def test_unit() -> None:
    """Run unit tests only (no database needed)."""
    sys.exit(_pytest("tests/unit"))


def test_integration() -> None:
    """Run integration tests; requires DATABASE_URL_APP and an initialised schema."""
    sys.exit(_pytest("tests/integration", "-v"))

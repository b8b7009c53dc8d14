"""``animesh doctor`` — environment diagnostics command.

Gathers system information and renders a Rich table summarising
whether the runtime environment satisfies animesh's requirements:
interpreter version, HTTP and UI libraries, the timezone database, and
the timezone and endpoint animesh would use right now.

This module lives in the CLI layer — it may import from ``infra``
and ``core``, and it renders via Rich.  No network call is made.
"""

from __future__ import annotations

import platform
import sys
from importlib.metadata import PackageNotFoundError, version

from animesh.cli import exit_codes
from animesh.cli.console import console
from animesh.config import Settings
from animesh.core.timezones import TimezoneResolver
from animesh.version import __version__

Check = tuple[str, str, str]


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _animesh_version_check() -> Check:
    return "animesh", __version__, "[green]OK[/green]"


def _python_version_check() -> Check:
    """Return (label, value, status) for the Python version row."""
    py_version = platform.python_version()
    ok = sys.version_info[:2] >= (3, 10)
    status = "[green]OK[/green]" if ok else "[red]FAIL (>=3.10 required)[/red]"
    return "Python", py_version, status


def _requests_check() -> Check:
    """Return (label, value, status) for the requests row."""
    try:
        import requests
    except ImportError:
        return "requests", "NOT INSTALLED", "[red]FAIL[/red]"
    requests_version = str(getattr(requests, "__version__", "unknown"))
    return "requests", requests_version, "[green]OK[/green]"


def _rich_check() -> Check:
    """Return (label, value, status) for the rich row."""
    try:
        import rich  # noqa: F401
    except ImportError:
        return "rich", "NOT INSTALLED", "[red]FAIL[/red]"
    try:
        rich_version = version("rich")
    except PackageNotFoundError:
        rich_version = "unknown"
    return "rich", rich_version, "[green]OK[/green]"


def _tz_database_check() -> Check:
    """Return (label, value, status) for the IANA zone database row."""
    import zoneinfo

    count = len(zoneinfo.available_timezones())
    if count == 0:
        return "tz database", "empty (pip install tzdata)", "[yellow]WARN[/yellow]"
    return "tz database", f"{count} zones", "[green]OK[/green]"


def _timezone_check(settings: Settings) -> Check:
    """Return (label, value, status) for the default display timezone row."""
    offset = TimezoneResolver.from_settings(settings).resolve(None)
    value = f"{offset.name or offset.label} ({offset.label}, {offset.source})"
    return "Timezone", value, "[green]OK[/green]"


def _endpoint_check(settings: Settings) -> Check:
    value = f"{settings.api_url} (timeout {settings.timeout:g}s)"
    return "Endpoint", value, "[green]OK[/green]"


def _status_plain(status: str) -> str:
    """Convert rich-markup status to plain text."""
    if "FAIL" in status:
        return "FAIL"
    if "WARN" in status:
        return "WARN"
    if "OK" in status:
        return "OK"
    return status


def _print_plain_doctor_table(checks: list[Check]) -> None:
    """Render doctor output without Rich."""
    print("\nanimesh doctor", file=sys.stderr)
    print("=" * 64, file=sys.stderr)
    print(f"{'Component':<12} {'Value':<42} {'Status':<8}", file=sys.stderr)
    print("-" * 64, file=sys.stderr)
    for label, value, status in checks:
        print(f"{label:<12} {value:<42} {_status_plain(status):<8}", file=sys.stderr)
    print(file=sys.stderr)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor(settings: Settings | None = None) -> int:
    """Execute all diagnostic checks and render a summary table.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when all critical checks pass,
        :data:`exit_codes.GENERAL_ERROR` if a critical check fails.
    """
    settings = settings if settings is not None else Settings.from_env()
    checks = [
        _animesh_version_check(),
        _python_version_check(),
        _requests_check(),
        _rich_check(),
        _tz_database_check(),
        _timezone_check(settings),
        _endpoint_check(settings),
    ]
    has_failure = any("FAIL" in status for _, _, status in checks)

    try:
        from rich.table import Table
    except ModuleNotFoundError:
        _print_plain_doctor_table(checks)
        print(
            "Some checks failed." if has_failure else "All checks passed.",
            file=sys.stderr,
        )
        return exit_codes.GENERAL_ERROR if has_failure else exit_codes.SUCCESS

    table = Table(
        title="animesh doctor",
        show_header=True,
        header_style="bold cyan",
        border_style="dim",
    )
    table.add_column("Component", style="bold", min_width=12)
    table.add_column("Value", min_width=20)
    table.add_column("Status", justify="center", min_width=8)
    for label, value, status in checks:
        table.add_row(label, value, status)

    console.print()
    console.print(table)
    console.print()

    if has_failure:
        console.print("[bold red]Some checks failed.[/bold red]")
        return exit_codes.GENERAL_ERROR

    console.print("[bold green]All checks passed.[/bold green]")
    return exit_codes.SUCCESS

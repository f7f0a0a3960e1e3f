# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Tail mode: poll a file and rescan whenever its contents change."""

from __future__ import annotations

import time
from collections.abc import Callable
from pathlib import Path

from rich.console import Console

from promptwall.cli.exit_codes import ExitCode, band_to_exit_code
from promptwall.core.exceptions import PromptwallError
from promptwall.models.report import ScanReport


def read_snapshot(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise PromptwallError(f"failed to read tailed file {path}: {exc}") from exc


def run_tail(
    path: Path,
    scan: Callable[[str], ScanReport],
    render: Callable[[ScanReport], None],
    poll_interval: float = 2.0,
    console: Console | None = None,
) -> int:
    """Rescan *path* on every content change until interrupted.

    Returns the exit code of the last rendered report (``0`` if none was
    rendered) once Ctrl+C stops the loop.
    """
    if console is None:
        console = Console(stderr=True)

    console.print(f"[dim]Tailing {path} every {poll_interval}s. Press Ctrl+C to stop.[/dim]")

    last_snapshot: str | None = None
    last_code = ExitCode.LOW

    try:
        while True:
            contents = read_snapshot(path)
            if contents != last_snapshot:
                last_snapshot = contents
                report = scan(contents)
                console.print(f"\n[bold]=== {path} ===[/bold]")
                render(report)
                last_code = band_to_exit_code(report.risk_band)

            time.sleep(poll_interval)
    except KeyboardInterrupt:
        console.print(f"\n[dim]Stopping tail for {path}[/dim]")

    return int(last_code)

# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Rich console output formatter for scan reports and rule listings."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from promptwall import __version__
from promptwall.core.constants import RiskBand, VerdictLabel
from promptwall.models.report import ScanReport
from promptwall.models.rule import Rule

console = Console()
err_console = Console(stderr=True)

BAND_COLORS = {
    RiskBand.HIGH: "bold red",
    RiskBand.MEDIUM: "yellow",
    RiskBand.LOW: "bold green",
}

LABEL_COLORS = {
    VerdictLabel.MALICIOUS: "bold red",
    VerdictLabel.SUSPICIOUS: "yellow",
    VerdictLabel.SAFE: "green",
    VerdictLabel.UNKNOWN: "dim",
}


def format_report(report: ScanReport, out: Console | None = None) -> None:
    """Print a scan report with Rich formatting."""
    out = out or console
    color = BAND_COLORS.get(report.risk_band, "white")

    out.print()
    out.print(f"[bold]promptwall v{__version__}[/bold] - Text Risk Scanner")
    out.print()
    out.print(
        Panel(
            f"[{color}]Risk Score: {report.risk_score:.1f} ({report.risk_band.title()})[/{color}]"
            f"  ({report.normalized_len} chars scanned)",
            style=color,
        )
    )

    if report.findings:
        table = Table(title="Findings", show_lines=False)
        table.add_column("Weight", justify="right")
        table.add_column("Rule", style="bold")
        table.add_column("Family", style="cyan")
        table.add_column("Span", style="dim")
        table.add_column("Excerpt")
        for finding in report.findings:
            table.add_row(
                f"{finding.weight:.1f}",
                Text(finding.rule_id),
                Text(finding.family),
                f"{finding.span[0]}..{finding.span[1]}",
                Text(finding.excerpt.replace("\n", " "), style="dim italic"),
            )
        out.print(table)
    else:
        out.print("  No findings.", style="bold green")
    out.print()

    breakdown = report.score_breakdown
    if breakdown.family_contributions:
        families = Table(title="Family Contributions", box=None, padding=(0, 2))
        families.add_column("Family", style="cyan")
        families.add_column("Occurrences", justify="right")
        families.add_column("Raw", justify="right")
        families.add_column("Adjusted", justify="right")
        for contribution in breakdown.family_contributions:
            families.add_row(
                Text(contribution.family),
                str(contribution.occurrences),
                f"{contribution.raw_weight:.1f}",
                f"{contribution.adjusted_weight:.1f}",
            )
        out.print(families)

    out.print(
        f"  Raw total: {breakdown.raw_total:.1f}  "
        f"Adjusted total: {breakdown.adjusted_total:.1f}  "
        f"Length factor: {breakdown.length_factor:.2f}"
    )
    out.print()

    verdict = report.llm_verdict
    if verdict is not None:
        label_color = LABEL_COLORS.get(verdict.label, "white")
        body = Text()
        body.append(f"{verdict.label.upper()}\n", style=label_color)
        body.append("Rationale: ", style="bold")
        body.append(f"{verdict.rationale}\n")
        body.append("Mitigation: ", style="bold")
        body.append(verdict.mitigation)
        out.print(Panel(body, title="LLM Verdict", border_style=label_color))
        out.print()


def format_rules(rules: Iterable[Rule], source: Path, out: Console | None = None) -> None:
    """Print loaded rules as a table, sorted by id."""
    out = out or console
    ordered = sorted(rules, key=lambda r: r.id)

    table = Table(title=f"{len(ordered)} rule(s) loaded from {source}")
    table.add_column("ID", style="bold")
    table.add_column("Kind")
    table.add_column("Weight", justify="right")
    table.add_column("Window", justify="right", style="dim")
    table.add_column("Description")
    for rule in ordered:
        table.add_row(
            Text(rule.id),
            rule.kind.value,
            f"{rule.weight:.1f}",
            str(rule.window) if rule.window is not None else "-",
            Text(rule.description),
        )
    out.print(table)

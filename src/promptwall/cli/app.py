# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Typer CLI application root."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Annotated, NoReturn

import typer
from rich.markup import escape

from promptwall.cli.exit_codes import ExitCode, band_to_exit_code
from promptwall.cli.formatters.console import console, err_console, format_report, format_rules
from promptwall.cli.formatters.json_fmt import format_json, format_rules_json
from promptwall.core.config import Settings, load_settings
from promptwall.core.exceptions import PromptwallError
from promptwall.core.logging import setup_logging
from promptwall.models.report import ScanReport
from promptwall.providers.base import ProviderClient
from promptwall.providers.factory import build_client
from promptwall.providers.profiles import ProviderProfiles
from promptwall.rules.store import load_rules_dir
from promptwall.scanner.pipeline import TextScanner, enrich_report

app = typer.Typer(
    name="promptwall",
    help="Text-risk firewall: scan prompts and logs for manipulation attempts",
    no_args_is_help=True,
)

_HEALTH_PROBE = "Health check probe"


def _fail(message: str | BaseException) -> NoReturn:
    err_console.print(f"[red]Error:[/red] {escape(str(message))}", highlight=False)
    raise typer.Exit(int(ExitCode.ERROR))


def _settings(ctx: typer.Context) -> Settings:
    return ctx.obj  # type: ignore[no-any-return]


@app.callback()
def main(
    ctx: typer.Context,
    rules_dir: Annotated[
        Path | None,
        typer.Option("--rules-dir", help="Directory containing keywords.txt and patterns.json"),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option("--config", help="Optional YAML/JSON configuration file"),
    ] = None,
    providers_config: Annotated[
        Path | None,
        typer.Option("--providers-config", help="Provider profile file (llm_providers.yaml)"),
    ] = None,
    debug: Annotated[
        bool, typer.Option("--debug", help="Enable verbose diagnostics on stderr")
    ] = False,
) -> None:
    """Load settings and logging shared by every command."""
    try:
        settings = load_settings(config)
    except PromptwallError as exc:
        _fail(exc)

    overrides: dict[str, object] = {}
    if rules_dir is not None:
        overrides["rules_dir"] = rules_dir
    if providers_config is not None:
        overrides["providers_config"] = providers_config
    if overrides:
        settings = settings.model_copy(update=overrides)

    try:
        setup_logging("DEBUG" if debug else settings.log_level, settings.log_format)
    except PromptwallError as exc:
        _fail(exc)
    ctx.obj = settings


# ---------------------------------------------------------------------------
# list-rules
# ---------------------------------------------------------------------------


@app.command("list-rules")
def list_rules(
    ctx: typer.Context,
    json_output: Annotated[
        bool, typer.Option("--json", help="Emit rules as JSON")
    ] = False,
) -> None:
    """List all loaded rules."""
    settings = _settings(ctx)
    try:
        rule_set = load_rules_dir(settings.rules_dir)
    except PromptwallError as exc:
        _fail(f"failed to load rules from {settings.rules_dir}: {exc}")

    if json_output:
        sys.stdout.write(format_rules_json(sorted(rule_set, key=lambda r: r.id)) + "\n")
    else:
        format_rules(rule_set, settings.rules_dir)


# ---------------------------------------------------------------------------
# scan
# ---------------------------------------------------------------------------


def _build_provider(
    settings: Settings,
    provider: str | None,
    model: str | None,
    endpoint: str | None,
    deployment: str | None,
) -> ProviderClient:
    profiles = ProviderProfiles.load(settings.providers_config)
    if provider:
        settings = settings.model_copy(update={"llm_provider": provider})
    settings = profiles.apply(settings)

    overrides = {
        key: value
        for key, value in (
            ("llm_model", model),
            ("llm_endpoint", endpoint),
            ("llm_deployment", deployment),
        )
        if value
    }
    if overrides:
        settings = settings.model_copy(update=overrides)
    return build_client(settings)


def _read_input(file: Path | None) -> str:
    if file is None:
        try:
            return sys.stdin.read()
        except (OSError, UnicodeDecodeError) as exc:
            _fail(f"failed to read standard input: {exc}")
    try:
        return file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        _fail(f"failed to read input file {file}: {exc}")


@app.command()
def scan(
    ctx: typer.Context,
    file: Annotated[
        Path | None,
        typer.Option("--file", help="File to scan; omit to read from stdin"),
    ] = None,
    json_output: Annotated[
        bool, typer.Option("--json", help="Emit JSON instead of human-readable output")
    ] = False,
    tail: Annotated[
        bool, typer.Option("--tail", help="Rescan --file whenever it changes")
    ] = False,
    with_llm: Annotated[
        bool, typer.Option("--with-llm", help="Augment the report with a provider verdict")
    ] = False,
    provider: Annotated[
        str | None,
        typer.Option("--provider", help="Provider override (openai, azure, anthropic, gemini, noop)"),
    ] = None,
    model: Annotated[
        str | None, typer.Option("--model", help="Model override for the selected provider")
    ] = None,
    endpoint: Annotated[
        str | None, typer.Option("--endpoint", help="Endpoint/base URL override")
    ] = None,
    deployment: Annotated[
        str | None, typer.Option("--deployment", help="Azure deployment override")
    ] = None,
) -> None:
    """Scan input (file or stdin) and print a risk report.

    Exit code: 0 low, 2 medium, 3 high, 1 on error.
    """
    settings = _settings(ctx)
    if tail and file is None:
        _fail("--tail requires --file to specify a path")

    try:
        rule_set = load_rules_dir(settings.rules_dir)
        scanner = TextScanner(rule_set, settings.risk_config())
        client = (
            _build_provider(settings, provider, model, endpoint, deployment) if with_llm else None
        )
    except PromptwallError as exc:
        _fail(exc)

    def scan_text(text: str) -> ScanReport:
        report = scanner.scan(text)
        if client is not None:
            report = asyncio.run(enrich_report(report, text, client))
        return report

    def render(report: ScanReport) -> None:
        if json_output:
            sys.stdout.write(format_json(report) + "\n")
        else:
            format_report(report)

    if tail:
        from promptwall.cli.tail import run_tail

        try:
            code = run_tail(file, scan_text, render, poll_interval=settings.tail_interval)
        except PromptwallError as exc:
            _fail(exc)
        raise typer.Exit(code)

    report = scan_text(_read_input(file))
    render(report)
    raise typer.Exit(int(band_to_exit_code(report.risk_band)))


# ---------------------------------------------------------------------------
# health
# ---------------------------------------------------------------------------


@app.command()
def health(
    ctx: typer.Context,
    provider: Annotated[
        str | None, typer.Option("--provider", help="Check a single provider")
    ] = None,
    dry_run: Annotated[
        bool, typer.Option("--dry-run", help="Validate configuration without a live call")
    ] = False,
) -> None:
    """Check that configured providers can be built and answer a probe."""
    settings = _settings(ctx)
    try:
        profiles = ProviderProfiles.load(settings.providers_config)
    except PromptwallError as exc:
        _fail(exc)

    if provider:
        profile = profiles.get(provider)
        targets = [profile.name if profile else provider]
    elif len(profiles):
        targets = profiles.names()
    elif "llm_provider" in settings.model_fields_set:
        targets = [settings.llm_provider]
    else:
        _fail("no providers configured; supply --provider or create llm_providers.yaml")

    failed = False
    for target in sorted(set(targets)):
        console.print(f"Checking provider [bold]{escape(target)}[/bold]...")
        try:
            target_settings = profiles.apply(
                settings.model_copy(update={"llm_provider": target}), target
            )
            client = build_client(target_settings)
            if not dry_run:
                asyncio.run(client.complete(_HEALTH_PROBE))
        except PromptwallError as exc:
            failed = True
            err_console.print(f"  [red]failed:[/red] {escape(str(exc))}", highlight=False)
        else:
            console.print("  [green]ok[/green]")

    raise typer.Exit(int(ExitCode.ERROR if failed else ExitCode.LOW))


if __name__ == "__main__":
    app()

"""CLI entry point: depscan.

Examples:
    depscan                                   # text report for ./go.mod
    depscan --go-mod path/to/go.mod --json    # JSON array of dependencies
    depscan --summary --markdown --out report.md
    depscan --fail-on GPL,AGPL                # exit 1 on any GPL/AGPL dependency
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click
import structlog

from depscan.config import Config
from depscan.core.logging import setup_logging
from depscan.exceptions import DepscanError
from depscan.formatters import FORMATS, render
from depscan.models import Dependency
from depscan.notifications import DiscordConfig, DiscordSender, Manager, build_non_mit_warning
from depscan.policy import (
    SORT_KEYS,
    FilterOptions,
    apply_filters,
    check_fail_on,
    find_non_mit,
    parse_csv,
    sort_dependencies,
)
from depscan.scanner import collect_dependencies_with_config

log = structlog.get_logger("depscan.cli")


def _fatal(message: str) -> None:
    click.echo(f"ERROR: {message}", err=True)
    sys.exit(1)


def _resolve_format(fmt: str, as_json: bool, markdown: bool) -> str:
    if as_json and markdown:
        raise click.UsageError("--json and --markdown are mutually exclusive")
    if as_json:
        return "json"
    if markdown:
        return "markdown"
    return fmt


async def _send_non_mit_warning(webhook_url: str, deps: list[Dependency]) -> int:
    manager = Manager([DiscordSender(DiscordConfig(webhook_url=webhook_url))])
    return await manager.send(build_non_mit_warning(deps))


@click.command()
@click.option("--go-mod", "go_mod", default="./go.mod", show_default=True, help="Path to go.mod")
@click.option("--summary", is_flag=True, help="Show summary statistics only")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON (shorthand for --format json)")
@click.option("--markdown", is_flag=True, help="Output as Markdown (shorthand for --format markdown)")
@click.option(
    "--format", "fmt", type=click.Choice(FORMATS), default="text", show_default=True,
    help="Output format",
)
@click.option("--out", "out_file", default=None, help="Write output to file instead of stdout")
@click.option("--direct-only", is_flag=True, help="Only show direct dependencies")
@click.option("--indirect-only", is_flag=True, help="Only show indirect dependencies")
@click.option("--allow", default="", help="Comma-separated list of allowed licenses")
@click.option("--deny", default="", help="Comma-separated list of denied licenses")
@click.option("--fail-on", default="", help="Comma-separated licenses to fail on (e.g. GPL,AGPL)")
@click.option(
    "--sort", "sort_by", type=click.Choice(SORT_KEYS), default="path", show_default=True,
    help="Sort order",
)
@click.option("--timeout", type=float, default=None, help="Seconds to wait for 'go list'")
@click.option("--license-names", default="", help="Comma-separated license file names, in order")
@click.option(
    "--fuzzy-license-names", is_flag=True,
    help="Fall back to case-insensitive LICENSE*/COPYING* matching",
)
@click.option("--workers", type=click.IntRange(min=1), default=None, help="License lookup threads")
@click.option(
    "--warn-non-mit", is_flag=True,
    help="Send a Discord warning for non-MIT licenses (needs DISCORD_WEBHOOK_URL)",
)
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(
    go_mod: str,
    summary: bool,
    as_json: bool,
    markdown: bool,
    fmt: str,
    out_file: str | None,
    direct_only: bool,
    indirect_only: bool,
    allow: str,
    deny: str,
    fail_on: str,
    sort_by: str,
    timeout: float | None,
    license_names: str,
    fuzzy_license_names: bool,
    workers: int | None,
    warn_non_mit: bool,
    verbose: bool,
) -> None:
    """Report and enforce the licenses of a Go module's dependencies."""
    setup_logging(verbose)

    if direct_only and indirect_only:
        raise click.UsageError("--direct-only and --indirect-only are mutually exclusive")
    output_format = _resolve_format(fmt, as_json, markdown)

    try:
        cfg = Config.from_env(go_mod)
    except DepscanError as e:
        _fatal(str(e))
        return
    if timeout is not None:
        cfg.resolve_timeout = timeout
    if workers is not None:
        cfg.workers = workers
    names = parse_csv(license_names)
    if names:
        cfg.license_names = names
    cfg.case_insensitive_fallback = fuzzy_license_names

    if warn_non_mit and not cfg.discord_webhook_url:
        _fatal("DISCORD_WEBHOOK_URL environment variable is required when using --warn-non-mit")

    try:
        deps = collect_dependencies_with_config(cfg)
    except DepscanError as e:
        _fatal(f"failed to collect dependencies: {e}")
        return

    # Policy is checked against every dependency, before view filters.
    violations = check_fail_on(deps, parse_csv(fail_on))
    if violations:
        log.warning("cli.policy_violation", count=len(violations), fail_on=fail_on)
        click.echo("ERROR: Found dependencies with prohibited licenses:", err=True)
        for dep in violations:
            click.echo(f"  {dep.path} ({dep.version}) {dep.license}", err=True)
        sys.exit(1)

    options = FilterOptions(
        direct_only=direct_only,
        indirect_only=indirect_only,
        allow=parse_csv(allow),
        deny=parse_csv(deny),
    )
    view = sort_dependencies(apply_filters(deps, options), sort_by)

    if warn_non_mit:
        non_mit = find_non_mit(view)
        if non_mit:
            click.echo(
                f"Found {len(non_mit)} non-MIT dependencies, sending Discord notification...",
                err=True,
            )
            delivered = asyncio.run(_send_non_mit_warning(cfg.discord_webhook_url, non_mit))
            if delivered:
                click.echo("Discord notification sent", err=True)
            else:
                click.echo("Discord notification could not be delivered", err=True)
        else:
            click.echo("All dependencies have MIT-compatible licenses", err=True)

    output = render(view, output_format, summary)
    if out_file:
        try:
            Path(out_file).write_text(output, encoding="utf-8")
        except OSError as e:
            _fatal(f"failed to write output file: {e}")
        click.echo(f"Output written to {out_file}")
    else:
        click.echo(output, nl=False)


if __name__ == "__main__":
    main()

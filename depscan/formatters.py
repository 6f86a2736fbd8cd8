"""Report rendering: text table, JSON and Markdown.

Formatters render the list exactly as given; ordering and filtering are
the caller's job.
"""

from __future__ import annotations

import json
from collections import Counter
from collections.abc import Sequence

from depscan.models import Dependency, Summary

FORMATS = ("text", "json", "markdown")

_TEXT_COLUMNS = ("MODULE", "VERSION", "TYPE", "LICENSE", "LICENSE FILE")


def summarize(deps: Sequence[Dependency]) -> Summary:
    counts = Counter(d.license for d in deps)
    indirect = sum(1 for d in deps if d.indirect)
    return Summary(
        total=len(deps),
        direct=len(deps) - indirect,
        indirect=indirect,
        licenses={name: counts[name] for name in sorted(counts)},
    )


def _dep_type(dep: Dependency) -> str:
    return "indirect" if dep.indirect else "direct"


def _text_summary(summary: Summary) -> list[str]:
    lines = [
        f"Total Dependencies: {summary.total}",
        f"Direct: {summary.direct} | Indirect: {summary.indirect}",
        f"Unique Licenses: {len(summary.licenses)}",
        "",
        "License Distribution:",
    ]
    lines.extend(f"  {name}: {count}" for name, count in summary.licenses.items())
    return lines


def format_text(deps: Sequence[Dependency], summary_only: bool = False) -> str:
    summary = summarize(deps)
    if summary_only:
        return "\n".join(_text_summary(summary)) + "\n"

    rows = [
        (d.path, d.version, _dep_type(d), d.license, d.license_file or "-") for d in deps
    ]
    widths = [len(c) for c in _TEXT_COLUMNS]
    for row in rows:
        widths = [max(w, len(cell)) for w, cell in zip(widths, row)]

    def _row(cells: Sequence[str]) -> str:
        return "  ".join(cell.ljust(w) for cell, w in zip(cells, widths)).rstrip()

    lines = ["DEPENDENCY REPORT", "=================", ""]
    lines.append(_row(_TEXT_COLUMNS))
    lines.append(_row(["-" * w for w in widths]))
    lines.extend(_row(row) for row in rows)
    lines.extend(["", "SUMMARY", "======="])
    lines.extend(_text_summary(summary))
    return "\n".join(lines) + "\n"


def format_json(deps: Sequence[Dependency], summary_only: bool = False) -> str:
    if summary_only:
        payload: object = summarize(deps).to_dict()
    else:
        payload = [d.to_dict() for d in deps]
    return json.dumps(payload, indent=2) + "\n"


def _markdown_summary(summary: Summary) -> list[str]:
    lines = [
        "## Summary",
        "",
        f"- **Total Dependencies:** {summary.total}",
        f"- **Direct:** {summary.direct}",
        f"- **Indirect:** {summary.indirect}",
        f"- **Unique Licenses:** {len(summary.licenses)}",
        "",
        "## License Distribution",
        "",
        "| License | Count |",
        "|---------|-------|",
    ]
    lines.extend(f"| {name} | {count} |" for name, count in summary.licenses.items())
    return lines


def _md_cell(text: str) -> str:
    return text.replace("|", "\\|")


def format_markdown(deps: Sequence[Dependency], summary_only: bool = False) -> str:
    summary = summarize(deps)
    lines = ["# Dependency Report", ""]
    if not summary_only:
        lines.extend(
            [
                "## Dependencies",
                "",
                "| Module | Version | Type | License | License File |",
                "|--------|---------|------|---------|--------------|",
            ]
        )
        for d in deps:
            lines.append(
                f"| `{d.path}` | {d.version} | {_dep_type(d).capitalize()} "
                f"| {_md_cell(d.license)} | {d.license_file or '-'} |"
            )
        lines.append("")
    lines.extend(_markdown_summary(summary))
    return "\n".join(lines) + "\n"


def render(deps: Sequence[Dependency], fmt: str = "text", summary_only: bool = False) -> str:
    """Render *deps* in one of :data:`FORMATS`."""
    if fmt == "json":
        return format_json(deps, summary_only)
    if fmt == "markdown":
        return format_markdown(deps, summary_only)
    if fmt == "text":
        return format_text(deps, summary_only)
    raise ValueError(f"unknown format {fmt!r}, expected one of {FORMATS}")

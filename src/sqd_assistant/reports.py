from __future__ import annotations

from typing import List

from .services.stats_service import CompletedReport
from .utils import format_date

REPORT_FORMATS = ("markdown", "text")

_TITLES = {"daily": "Daily Report", "weekly": "Weekly Report"}


def _title(report: CompletedReport) -> str:
    return _TITLES.get(report.kind, "Work Report")


def _date_range(report: CompletedReport) -> str:
    return f"{format_date(report.start)} to {format_date(report.end)}"


def _share(report: CompletedReport, count: int) -> str:
    return f"{count / len(report.todos) * 100:.1f}"


# PUBLIC_INTERFACE
def render_markdown(report: CompletedReport, generated_at: str) -> str:
    """Render a completed-work report as Markdown."""
    lines: List[str] = [
        f"# {_title(report)}",
        "",
        f"**Date range**: {_date_range(report)}",
        "",
        "---",
        "",
        "## Overview",
        "",
        f"- Completed tasks: **{len(report.todos)}**",
        f"- Brokers involved: **{report.broker_count}**",
        "",
        "---",
        "",
        "## Work by broker",
        "",
    ]
    for broker, todos in report.by_broker:
        lines += [
            f"### {broker}",
            "",
            f"- Completed tasks: **{len(todos)}**",
            f"- Share of work: **{_share(report, len(todos))}%**",
            "",
            "**Tasks:**",
            "",
        ]
        lines += [f"{i}. ✅ {todo['title']}" for i, todo in enumerate(todos, start=1)]
        lines.append("")

    lines += ["---", "", f"*Generated at {generated_at}*", ""]
    return "\n".join(lines)


# PUBLIC_INTERFACE
def render_text(report: CompletedReport, generated_at: str) -> str:
    """Render a completed-work report as plain text."""
    rule = "-" * 50
    lines: List[str] = [
        _title(report),
        f"Date range: {_date_range(report)}",
        "=" * 50,
        "",
        "Overview",
        rule,
        f"Completed tasks: {len(report.todos)}",
        f"Brokers involved: {report.broker_count}",
        "",
        "Work by broker",
        rule,
        "",
    ]
    for broker, todos in report.by_broker:
        lines += [
            f"[{broker}]",
            f"  Completed tasks: {len(todos)}",
            f"  Share of work: {_share(report, len(todos))}%",
            "  Tasks:",
        ]
        lines += [f"    {i}. {todo['title']}" for i, todo in enumerate(todos, start=1)]
        lines.append("")

    lines += [rule, f"Generated at: {generated_at}", ""]
    return "\n".join(lines)


def render(report: CompletedReport, fmt: str, generated_at: str) -> str:
    if fmt == "markdown":
        return render_markdown(report, generated_at)
    return render_text(report, generated_at)

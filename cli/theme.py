"""Unified Rich theme and reusable UI helper functions for the CLI."""

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.theme import Theme

GATE_THEME = Theme({
    "app.title": "bold",
    "success": "green",
    "warning": "yellow",
    "error": "red",
    "info": "blue",
    "muted": "dim",
    "accent": "cyan",
    "stat.label": "dim",
    "stat.value": "bold",
    "chapter.num": "blue",
    "character.name": "bold cyan",
})

VERDICT_STYLES = {
    "pass": "success",
    "revise": "warning",
    "reject": "error",
}

SEVERITY_STYLES = {
    "critical": "bold red",
    "major": "yellow",
    "minor": "dim",
}

IMPORTANCE_STYLES = SEVERITY_STYLES

STATUS_STYLES = {
    "planted": "cyan",
    "referenced": "blue",
    "resolved": "green",
    "abandoned": "dim",
}


def get_console() -> Console:
    """Return a Console instance with the gate theme applied."""
    return Console(theme=GATE_THEME)


def app_header(title: str = "opennovel-gate") -> Rule:
    """Return a Rule element for the application header banner."""
    return Rule(title=f"[bold]{title}[/]", style="dim")


def command_panel(title: str, fields: dict[str, str]) -> Panel:
    """Return a Panel displaying label/value pairs.

    Args:
        title: Panel title (e.g. "连续性门禁配置").
        fields: Ordered dict of label -> value pairs.
    """
    lines = []
    for label, value in fields.items():
        lines.append(f"  [stat.label]{label}:[/] [stat.value]{value}[/]")
    body = "\n".join(lines)
    return Panel(body, title=f"[bold]{title}[/]", box=box.ROUNDED, border_style="dim", padding=(0, 2))


def assessment_panel(assessment) -> Panel:
    """Return a Panel with the score, verdict and coverage metrics."""
    verdict = assessment.verdict.value
    style = VERDICT_STYLES.get(verdict, "info")
    metrics = assessment.metrics
    totals = metrics.signal_totals

    body = (
        f"  [stat.label]得分:[/] [stat.value]{assessment.score:.2f}[/]  "
        f"[muted]|[/]  [stat.label]判定:[/] [{style}]{verdict}[/]\n"
        f"  [stat.label]开篇承接:[/] {metrics.opening_coverage:.3f}  "
        f"[stat.label]事件链:[/] {metrics.event_coverage:.3f}  "
        f"[stat.label]线索:[/] {metrics.hook_coverage:.3f}\n"
        f"  [stat.label]时间提示:[/] {'是' if metrics.timeline_cue else '否'}  "
        f"[muted]|[/]  [stat.label]信号:[/] "
        f"{totals.anchors}/{totals.events}/{totals.hooks}"
    )
    return Panel(
        body,
        title="[bold]连续性评估[/]",
        box=box.ROUNDED,
        border_style=VERDICT_STYLES.get(verdict, "dim"),
        padding=(0, 2),
    )


def issues_table(issues: list) -> Table:
    """Build a Rich Table of continuity issues."""
    table = Table(box=box.ROUNDED, border_style="dim", show_header=True, padding=(0, 1))
    table.add_column("严重度")
    table.add_column("类型", style="muted")
    table.add_column("说明")

    for issue in issues:
        severity = issue.severity.value
        table.add_row(
            f"[{SEVERITY_STYLES.get(severity, 'white')}]{severity}[/]",
            issue.type.value,
            issue.message,
        )
    return table


def hooks_table(hooks: list, overdue_map: dict) -> Table:
    """Build a Rich Table of hooks in display order.

    Args:
        hooks: NarrativeHook objects, already filtered and sorted.
        overdue_map: hook id -> OverdueHookWarning.
    """
    table = Table(title="叙事线索", show_lines=True, border_style="dim")
    table.add_column("ID", style="chapter.num")
    table.add_column("描述")
    table.add_column("类型", style="muted")
    table.add_column("重要度")
    table.add_column("状态")
    table.add_column("埋设", justify="right")
    table.add_column("逾期", justify="right")

    for hook in hooks:
        importance = hook.importance.value
        status = hook.status.value
        warning = overdue_map.get(hook.id)
        description = hook.description
        if len(description) > 40:
            description = description[:40] + "..."

        table.add_row(
            hook.id,
            description,
            hook.type.value,
            f"[{IMPORTANCE_STYLES.get(importance, 'white')}]{importance}[/]",
            f"[{STATUS_STYLES.get(status, 'white')}]{status}[/]",
            f"第{hook.planted_in_chapter}章",
            f"[error]+{warning.chapters_overdue}[/]" if warning else "",
        )
    return table


def hooks_report_panel(report, current_chapter: int) -> Panel:
    """Return a Panel with aggregate hook statistics."""
    by_type = ", ".join(f"{k}={v}" for k, v in sorted(report.hooks_by_type.items())) or "-"
    unresolved = ", ".join(f"{k}={v}" for k, v in report.unresolved_by_importance.items())

    lines = [
        f"  [stat.label]未回收:[/] [stat.value]{report.total_unresolved}[/]  "
        f"[muted]|[/]  [stat.label]已回收:[/] [stat.value]{report.total_resolved}[/]  "
        f"[muted]|[/]  [stat.label]已放弃:[/] [stat.value]{report.total_abandoned}[/]",
        f"  [stat.label]回收率:[/] {report.resolution_rate:.0%}  "
        f"[muted]|[/]  [stat.label]平均回收跨度:[/] {report.average_resolution_chapters:.1f} 章",
        f"  [stat.label]按类型:[/] {by_type}",
        f"  [stat.label]未回收按重要度:[/] {unresolved}",
    ]
    if report.overdue_hooks:
        lines.append(f"  [error]逾期线索 (第{current_chapter}章):[/]")
        for hook in report.overdue_hooks[:5]:
            lines.append(f"    - {hook.description} [muted](第{hook.planted_in_chapter}章)[/]")
        if len(report.overdue_hooks) > 5:
            lines.append(f"    [muted]... (共{len(report.overdue_hooks)}条)[/]")

    return Panel(
        "\n".join(lines),
        title="[bold]线索报告[/]",
        box=box.ROUNDED,
        border_style="dim",
        padding=(0, 2),
    )

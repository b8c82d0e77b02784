"""CLI entry point — continuity gate and narrative hook tools.

用法：
  opennovel-gate assess draft.txt --history history.json
  opennovel-gate hooks hooks.json --tab planted --search 罗盘
  opennovel-gate report hooks.json
  opennovel-gate gate-config --workflow-config workflow.json
  opennovel-gate --help
"""

import json
import logging
import os
import sys
from collections.abc import Mapping
from pathlib import Path

# Ensure UTF-8 output on Windows to avoid GBK encoding errors with Rich
if sys.platform == "win32":
    os.environ.setdefault("PYTHONIOENCODING", "utf-8")

import click

from cli.theme import (
    get_console,
    app_header,
    command_panel,
    assessment_panel,
    issues_table,
    hooks_table,
    hooks_report_panel,
)
from config.exceptions import InvalidInputError, NovelGateError
from config.logging_config import setup_logging
from config.settings import Settings
from continuity.gate import assess_chapter_continuity
from continuity.gate_config import resolve_continuity_gate_config
from hooks.overdue import build_hooks_report, format_hooks_for_context, get_overdue_hooks
from hooks.priority import build_overdue_hook_map, filter_and_sort_hooks, get_hooks_current_chapter
from models.enums import HookStatus, Verdict
from models.hook import NarrativeHook, OverdueHookWarning

console = get_console()

logger = logging.getLogger(__name__)

EXIT_REJECTED = 2

_TAB_CHOICES = ["all"] + [status.value for status in HookStatus]


def _init_logging(verbose: bool) -> Settings:
    """Configure logging based on verbosity; console logging only when verbose."""
    level = logging.DEBUG if verbose else logging.INFO
    settings = Settings()
    setup_logging(level=level, log_dir=settings.log_dir, console_enabled=verbose)
    return settings


def _load_json(path: str):
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise InvalidInputError(path, f"cannot read file: {e}") from e
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidInputError(path, f"invalid JSON: {e}") from e


def _load_history(path: str) -> tuple[list, list]:
    """Read ``{"chapters": [...], "summaries": [...]}``."""
    data = _load_json(path)
    if not isinstance(data, Mapping):
        raise InvalidInputError(path, "expected an object with chapters and summaries")
    chapters = data.get("chapters") or []
    summaries = data.get("summaries") or []
    if not isinstance(chapters, list) or not isinstance(summaries, list):
        raise InvalidInputError(path, "chapters and summaries must be lists")
    return chapters, summaries


def _load_hooks(path: str) -> tuple[list[NarrativeHook], list[OverdueHookWarning] | None]:
    """Read a hook list, or ``{"hooks": [...], "overdueWarnings": [...]}``.

    Returns the hooks and the precomputed warnings (None when absent).
    """
    data = _load_json(path)
    warnings = None
    if isinstance(data, Mapping):
        raw_warnings = data.get("overdueWarnings", data.get("overdue_warnings"))
        if isinstance(raw_warnings, list):
            warnings = [
                OverdueHookWarning.from_dict(item) for item in raw_warnings if isinstance(item, Mapping)
            ]
        data = data.get("hooks")
    if not isinstance(data, list):
        raise InvalidInputError(path, "expected a list of hooks")
    hooks = [NarrativeHook.from_dict(item) for item in data if isinstance(item, Mapping)]
    return hooks, warnings


def _load_workflow_config(path: str | None):
    if path is None:
        return {}
    data = _load_json(path)
    if not isinstance(data, Mapping):
        raise InvalidInputError(path, "expected a workflow config object")
    return data


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, verbose):
    """OpenNovel Gate — 章节连续性门禁与叙事线索追踪

    \b
    常用命令：
      opennovel-gate assess draft.txt --history history.json
      opennovel-gate hooks hooks.json
      opennovel-gate report hooks.json
    """
    ctx.obj = _init_logging(verbose)


# ---------------------------------------------------------------------------
# assess command
# ---------------------------------------------------------------------------

@cli.command()
@click.argument("candidate", type=click.Path(exists=True, dir_okay=False))
@click.option("--history", "-H", "history_path", required=True,
              type=click.Path(exists=True, dir_okay=False),
              help="历史章节与摘要 JSON（{chapters, summaries}）")
@click.option("--workflow-config", "-w", "workflow_config_path", default=None,
              type=click.Path(exists=True, dir_okay=False), help="小说工作流配置 JSON（可选）")
@click.option("--json", "as_json", is_flag=True, help="以 JSON 输出评估结果")
@click.pass_obj
def assess(settings: Settings, candidate, history_path, workflow_config_path, as_json):
    """评估候选章节与前文的连续性。判定为 reject 时退出码为 2。

    示例：
      opennovel-gate assess ch12.txt --history history.json
      opennovel-gate assess ch12.txt -H history.json -w workflow.json --json
    """
    try:
        content = Path(candidate).read_text(encoding="utf-8")
        chapters, summaries = _load_history(history_path)
        workflow_config = _load_workflow_config(workflow_config_path)
    except (OSError, UnicodeDecodeError) as e:
        raise click.ClickException(f"无法读取候选章节：{e}")
    except NovelGateError as e:
        raise click.ClickException(str(e))

    gate_config = resolve_continuity_gate_config(workflow_config, **settings.gate_config_defaults())
    assessment = assess_chapter_continuity(
        content,
        chapters,
        summaries,
        pass_score=gate_config.pass_score,
        reject_score=gate_config.reject_score,
        **settings.signal_limits(),
    )
    logger.info(
        "CLI assess %s: score=%.2f verdict=%s", candidate, assessment.score, assessment.verdict.value
    )

    if as_json:
        click.echo(json.dumps(assessment.to_dict(), ensure_ascii=False, indent=2))
    else:
        console.print(app_header())
        console.print()
        console.print(assessment_panel(assessment))
        if assessment.issues:
            console.print(issues_table(assessment.issues))
        matched = assessment.matched_signals
        if matched.anchors or matched.events or matched.hooks:
            console.print()
            console.print("[bold]命中信号[/]")
            for label, signals in (("锚点", matched.anchors), ("事件", matched.events), ("线索", matched.hooks)):
                if signals:
                    console.print(f"  [stat.label]{label}:[/] {'、'.join(signals)}")

    if assessment.verdict == Verdict.REJECT:
        sys.exit(EXIT_REJECTED)


# ---------------------------------------------------------------------------
# hooks command
# ---------------------------------------------------------------------------

@cli.command()
@click.argument("hooks_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--tab", "-t", default="all", type=click.Choice(_TAB_CHOICES), help="按状态筛选")
@click.option("--search", "-s", default="", help="搜索描述、备注、类型、重要度或角色")
@click.option("--chapter", "-c", default=None, type=int, help="当前章节（默认取线索中最大章节）")
@click.option("--threshold", default=None, type=int, help="统一逾期阈值（章），覆盖单条线索设置及文件中预先计算的逾期提醒")
@click.option("--context", "as_context", is_flag=True, help="输出用于章节生成提示词的线索区块")
@click.pass_obj
def hooks(settings: Settings, hooks_path, tab, search, chapter, threshold, as_context):
    """按紧急程度列出叙事线索。

    示例：
      opennovel-gate hooks hooks.json
      opennovel-gate hooks hooks.json -t planted -s 罗盘
      opennovel-gate hooks hooks.json -c 30 --context
    """
    try:
        hook_list, warnings = _load_hooks(hooks_path)
    except NovelGateError as e:
        raise click.ClickException(str(e))

    current_chapter = chapter if chapter is not None else get_hooks_current_chapter(hook_list)

    if as_context:
        click.echo(format_hooks_for_context(
            hook_list, current_chapter, threshold,
            default_threshold=settings.hook_reminder_threshold,
        ))
        return

    # An explicit --threshold replaces warnings precomputed in the file
    if warnings is None or threshold is not None:
        warnings = get_overdue_hooks(
            hook_list, current_chapter, threshold,
            default_threshold=settings.hook_reminder_threshold,
        )
    overdue_map = build_overdue_hook_map(warnings)
    listed = filter_and_sort_hooks(hook_list, active_tab=tab, search_query=search, overdue_map=overdue_map)

    console.print(app_header())
    console.print()
    if not listed:
        console.print("[warning]没有符合条件的线索。[/]")
        return
    console.print(hooks_table(listed, overdue_map))
    console.print(
        f"[muted]共 {len(listed)} 条，当前第{current_chapter}章，逾期 {len(overdue_map)} 条[/]"
    )


# ---------------------------------------------------------------------------
# report command
# ---------------------------------------------------------------------------

@cli.command()
@click.argument("hooks_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--chapter", "-c", default=None, type=int, help="当前章节（默认取线索中最大章节）")
@click.pass_obj
def report(settings: Settings, hooks_path, chapter):
    """汇总线索回收情况与逾期线索。

    示例：
      opennovel-gate report hooks.json
      opennovel-gate report hooks.json -c 40
    """
    try:
        hook_list, _ = _load_hooks(hooks_path)
    except NovelGateError as e:
        raise click.ClickException(str(e))

    current_chapter = chapter if chapter is not None else get_hooks_current_chapter(hook_list)
    hooks_report = build_hooks_report(
        hook_list, current_chapter, default_threshold=settings.hook_reminder_threshold,
    )

    console.print(app_header())
    console.print()
    console.print(hooks_report_panel(hooks_report, current_chapter))


# ---------------------------------------------------------------------------
# gate-config command
# ---------------------------------------------------------------------------

@cli.command("gate-config")
@click.option("--workflow-config", "-w", "workflow_config_path", default=None,
              type=click.Path(exists=True, dir_okay=False), help="小说工作流配置 JSON（可选）")
@click.option("--json", "as_json", is_flag=True, help="以 JSON 输出")
@click.pass_obj
def gate_config(settings: Settings, workflow_config_path, as_json):
    """显示解析后的连续性门禁配置。

    示例：
      opennovel-gate gate-config
      opennovel-gate gate-config -w workflow.json --json
    """
    try:
        workflow_config = _load_workflow_config(workflow_config_path)
    except NovelGateError as e:
        raise click.ClickException(str(e))

    config = resolve_continuity_gate_config(workflow_config, **settings.gate_config_defaults())

    if as_json:
        click.echo(json.dumps({
            "enabled": config.enabled,
            "pass_score": config.pass_score,
            "reject_score": config.reject_score,
            "max_repair_attempts": config.max_repair_attempts,
        }, indent=2))
        return

    console.print(command_panel("连续性门禁配置", {
        "启用": "是" if config.enabled else "否",
        "通过分": f"{config.pass_score:g}",
        "拒绝分": f"{config.reject_score:g}",
        "最大修复次数": str(config.max_repair_attempts),
    }))


def main():
    cli()


if __name__ == "__main__":
    main()

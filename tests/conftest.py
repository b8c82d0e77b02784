"""Shared pytest fixtures for the opennovel-gate test suite."""

import pytest
from unittest.mock import AsyncMock


# ---------------------------------------------------------------------------
# Settings fixture
# ---------------------------------------------------------------------------

@pytest.fixture
def settings(tmp_path):
    """Return a Settings instance with code defaults and logs under tmp_path."""
    from config.settings import Settings
    return Settings(_env_file=None, log_dir=tmp_path / "logs")


# ---------------------------------------------------------------------------
# Chapter history fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def station_chapters():
    """Single prior chapter ending at the underground station."""
    from models.chapter import ChapterRef
    return [
        ChapterRef(
            order=11,
            title="夺回",
            content="主角夺回破损罗盘。警报突然拉响。主角带着罗盘冲进地下站台。",
        ),
    ]


@pytest.fixture
def station_summaries():
    from models.chapter import ChapterSummaryRef
    return [
        ChapterSummaryRef(
            chapter_number=11,
            one_line="主角夺回罗盘",
            key_events=["主角夺回破损罗盘", "警报突然拉响"],
            hooks_planted=["罗盘真实用途"],
        ),
    ]


@pytest.fixture
def continuing_candidate():
    """Candidate that picks up right where chapter 11 ended."""
    return (
        "警报声仍在地下站台回荡，主角握着破损罗盘冲进隧道。"
        "他回想起昨夜夺回罗盘的代价，决定在天亮前破解罗盘真实用途。"
        "如果失败，黑潮会提前降临整座城。"
    )


@pytest.fixture
def siege_chapters():
    from models.chapter import ChapterRef
    return [ChapterRef(order=20, content="城防结界崩裂。主角重伤倒地。队友决定连夜撤离北城。")]


@pytest.fixture
def siege_summaries():
    from models.chapter import ChapterSummaryRef
    return [
        ChapterSummaryRef(
            chapter_number=20,
            key_events=["城防结界崩裂", "队友决定连夜撤离北城"],
            hooks_planted=["北城地下祭坛坐标"],
        ),
    ]


@pytest.fixture
def unrelated_candidate():
    """Candidate that ignores the siege entirely."""
    return "午后的校园里，主角第一次遇见转学生，两人在操场聊起电影。"


# ---------------------------------------------------------------------------
# Hook fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_hooks():
    """Three hooks: active critical mystery, referenced major, resolved minor."""
    from models.hook import NarrativeHook
    from models.enums import HookType, HookStatus, HookImportance
    return [
        NarrativeHook(
            id="h1",
            type=HookType.MYSTERY,
            description="主角身世之谜",
            status=HookStatus.PLANTED,
            importance=HookImportance.CRITICAL,
            planted_in_chapter=3,
            referenced_in_chapters=[7],
            related_characters=["林青"],
            notes="主线核心悬念",
        ),
        NarrativeHook(
            id="h2",
            type=HookType.FORESHADOWING,
            description="古剑异动",
            status=HookStatus.REFERENCED,
            importance=HookImportance.MAJOR,
            planted_in_chapter=6,
            referenced_in_chapters=[9],
            related_characters=["沈月"],
        ),
        NarrativeHook(
            id="h3",
            type=HookType.SETUP,
            description="宗门大会约定",
            status=HookStatus.RESOLVED,
            importance=HookImportance.MINOR,
            planted_in_chapter=2,
            referenced_in_chapters=[5],
            resolved_in_chapter=8,
            related_characters=["林青"],
        ),
    ]


@pytest.fixture
def sample_hook_dicts():
    """The sample hooks in their JSON (camelCase) form."""
    return [
        {
            "id": "h1", "type": "mystery", "description": "主角身世之谜", "status": "planted",
            "importance": "critical", "plantedInChapter": 3, "referencedInChapters": [7],
            "relatedCharacters": ["林青"], "notes": "主线核心悬念",
        },
        {
            "id": "h2", "type": "foreshadowing", "description": "古剑异动", "status": "referenced",
            "importance": "major", "plantedInChapter": 6, "referencedInChapters": [9],
            "relatedCharacters": ["沈月"],
        },
        {
            "id": "h3", "type": "setup", "description": "宗门大会约定", "status": "resolved",
            "importance": "minor", "plantedInChapter": 2, "referencedInChapters": [5],
            "resolvedInChapter": 8, "relatedCharacters": ["林青"],
        },
    ]


# ---------------------------------------------------------------------------
# Regenerator mock
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_regenerate():
    """AsyncMock standing in for the chapter regenerator."""
    return AsyncMock(return_value="修复后的章节。")

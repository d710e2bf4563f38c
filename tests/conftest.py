"""pytest 설정 및 공유 fixture

테스트 인프라:
- 환경 변수 기본값 (Mock 저장소, 더미 API 키)
- 댓글 레코드 팩토리
- 자동 참여자 레지스트리
"""

import os

# 설정은 import 시점에 캐싱되므로 모듈 import 전에 환경 변수를 지정한다
os.environ.setdefault("USE_MOCK_STORE", "true")
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")
os.environ.setdefault("APP_ENV", "test")

from datetime import datetime, timedelta, timezone

import pytest

from vrsa_discussion.constants.agents import AgentRegistry, build_agent_registry
from vrsa_discussion.core.config import Settings
from vrsa_discussion.models.thread import CommentRecord

BASE_TIME = datetime(2026, 1, 20, 9, 0, tzinfo=timezone.utc)


# ===== 설정 =====


@pytest.fixture
def test_settings() -> Settings:
    """테스트용 설정 (짧은 디바운스)"""
    return Settings(
        app_env="test",
        use_mock_store=True,
        openai_api_key="test-openai-key",
        bot_reply_debounce_seconds=0.01,
    )


@pytest.fixture
def agent_registry(test_settings: Settings) -> AgentRegistry:
    """기본 자동 참여자(vrsabot) 레지스트리"""
    return build_agent_registry(test_settings)


# ===== 댓글 레코드 =====


@pytest.fixture
def make_record():
    """CommentRecord 팩토리 (minutes로 created_at 순서 지정)"""

    def _make(
        comment_id: str,
        parent_id: str | None = None,
        minutes: int = 0,
        subject_id: str = "post-1",
        content: str | None = None,
        author_id: str | None = "user-1",
        author_name: str | None = "Alice",
        is_automated: bool = False,
        automated_name: str | None = None,
    ) -> CommentRecord:
        return CommentRecord(
            id=comment_id,
            subject_id=subject_id,
            parent_id=parent_id,
            content=content if content is not None else f"content of {comment_id}",
            created_at=BASE_TIME + timedelta(minutes=minutes),
            author_id=None if is_automated else author_id,
            author_name=None if is_automated else author_name,
            is_automated=is_automated,
            automated_name=automated_name,
        )

    return _make

"""LangGraph 워크플로우 설정.

구조:
- 환경 변수: API 키 (단일 진실 공급원은 core.config)
- GraphSettings: 재시도, 타임아웃 등 워크플로우 전역 설정
"""

from functools import lru_cache

from pydantic import BaseModel, ConfigDict

from vrsa_discussion.core.config import get_settings

_settings = get_settings()

# ============================================================================
# 환경 변수
# ============================================================================

OPENAI_API_KEY = _settings.openai_api_key

# ============================================================================
# 전역 설정
# ============================================================================

MAX_RETRY = _settings.generation_max_retry  # 빈 응답 재생성 최대 횟수
REQUEST_TIMEOUT = _settings.generation_timeout_seconds  # 생성 전체 타임아웃 (초)
MAX_TOKENS = 256  # 짧은 대화형 응답
MAX_REPLY_WORDS = 20  # 프롬프트 상 응답 길이 제한
TRANSCRIPT_MAX_ENTRIES = _settings.transcript_max_entries


class GraphSettings(BaseModel):
    """워크플로우 전역 설정.

    Attributes:
        max_retry_count: 검증 실패 시 재생성 최대 횟수
        request_timeout: 생성 호출 전체 타임아웃 (초)
        max_tokens: LLM 생성 최대 토큰 수
        transcript_max_entries: 프롬프트에 포함할 최근 대화 수
    """

    model_config = ConfigDict(frozen=True)

    max_retry_count: int = MAX_RETRY
    request_timeout: float = REQUEST_TIMEOUT
    max_tokens: int = MAX_TOKENS
    transcript_max_entries: int = TRANSCRIPT_MAX_ENTRIES


@lru_cache
def get_graph_settings() -> GraphSettings:
    """워크플로우 설정 싱글톤 반환."""
    return GraphSettings()

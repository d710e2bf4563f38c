"""응답 검증 노드"""

import logging
from typing import Literal

from vrsa_discussion.infrastructure.graph.config import MAX_REPLY_WORDS, get_graph_settings
from vrsa_discussion.infrastructure.graph.workflows.bot_mention.state import (
    BotMentionState,
)

logger = logging.getLogger(__name__)

# 응답 전체를 감싼 따옴표 쌍
_QUOTE_PAIRS = {'"': '"', "'": "'", "“": "”", "‘": "’"}


def strip_wrapping_quotes(text: str) -> str:
    """응답 전체를 감싼 따옴표 제거 (중첩 포함)"""
    cleaned = text.strip()
    while len(cleaned) >= 2 and _QUOTE_PAIRS.get(cleaned[0]) == cleaned[-1]:
        cleaned = cleaned[1:-1].strip()
    return cleaned


async def validate_response(state: BotMentionState) -> dict:
    """응답 품질 검증

    Contract:
        reads: bot_mention_raw_response, bot_mention_retry_count, bot_mention_error
        writes: bot_mention_validation, bot_mention_response,
                bot_mention_retry_count, bot_mention_retry_reason
        side-effects: None
        failures: None (always succeeds)
    """
    if state.get("bot_mention_error"):
        # LLM 호출 자체가 실패한 경우 재시도하지 않는다
        return {
            "bot_mention_validation": {"passed": False, "issues": ["generation failed"], "fatal": True},
            "bot_mention_response": None,
        }

    response = strip_wrapping_quotes(state.get("bot_mention_raw_response") or "")
    retry_count = state.get("bot_mention_retry_count", 0)
    max_retry = get_graph_settings().max_retry_count

    issues = []  # 재생성 필요
    warnings = []  # 기록만 하고 통과

    # 1. 빈 응답
    if not response:
        issues.append("empty reply")

    # 2. 길이 (프롬프트 제한의 3배 초과)
    elif len(response.split()) > MAX_REPLY_WORDS * 3:
        warnings.append(f"reply longer than {MAX_REPLY_WORDS} words")

    if not issues:
        if warnings:
            logger.warning(f"[validate_response] Accepted with warnings: {warnings}")
        else:
            logger.info("[validate_response] Validation passed")
        return {
            "bot_mention_validation": {"passed": True, "issues": [], "warnings": warnings},
            "bot_mention_response": response,
            "bot_mention_retry_count": retry_count,
        }

    new_retry_count = retry_count + 1
    logger.warning(f"[validate_response] Validation failed: {issues}, retry={new_retry_count}")

    if new_retry_count > max_retry:
        logger.info("[validate_response] Max retry exceeded with empty reply")
        return {
            "bot_mention_validation": {"passed": False, "issues": issues, "fatal": True},
            "bot_mention_response": None,
            "bot_mention_retry_count": new_retry_count,
            "bot_mention_error": "EMPTY_RESPONSE",
        }

    return {
        "bot_mention_validation": {"passed": False, "issues": issues},
        "bot_mention_retry_count": new_retry_count,
        "bot_mention_retry_reason": "; ".join(issues),
    }


def route_validation(state: BotMentionState) -> Literal["generator", "end"]:
    """검증 결과에 따른 라우팅

    Contract:
        reads: bot_mention_validation
        returns: "generator" (재생성) 또는 "end" (완료/실패)
    """
    validation = state.get("bot_mention_validation") or {}

    if validation.get("passed", False) or validation.get("fatal", False):
        return "end"

    return "generator"

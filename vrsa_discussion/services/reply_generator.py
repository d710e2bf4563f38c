"""봇 응답 생성 어댑터

대화록 + 원본 게시물 내용 → 응답 문자열.
bot_mention LangGraph 워크플로우를 타임아웃 안에서 실행한다.
"""

import asyncio
import logging
from typing import Protocol

from langgraph.graph.state import CompiledStateGraph

from vrsa_discussion.core.telemetry import traced_function
from vrsa_discussion.infrastructure.graph.config import get_graph_settings
from vrsa_discussion.models.thread import ThreadTranscriptEntry

logger = logging.getLogger(__name__)


class ReplyGenerationError(Exception):
    """응답 생성 실패 (타임아웃/LLM 오류/빈 응답)"""


class ReplyGenerator(Protocol):
    """응답 생성 서비스 인터페이스"""

    async def generate_reply(
        self, transcript: list[ThreadTranscriptEntry], source_content: str
    ) -> str:
        """응답 생성 (제한 시간 내 반환 또는 ReplyGenerationError)"""
        ...


class GraphReplyGenerator:
    """bot_mention 워크플로우 기반 응답 생성기"""

    def __init__(
        self,
        graph: CompiledStateGraph | None = None,
        timeout_seconds: float | None = None,
    ):
        if graph is None:
            from vrsa_discussion.infrastructure.graph.workflows.bot_mention import (
                bot_mention_graph,
            )

            graph = bot_mention_graph
        self.graph = graph
        self.timeout_seconds = (
            timeout_seconds
            if timeout_seconds is not None
            else get_graph_settings().request_timeout
        )

    @traced_function("bot_reply.generate")
    async def generate_reply(
        self, transcript: list[ThreadTranscriptEntry], source_content: str
    ) -> str:
        initial_state = {
            "bot_mention_transcript": [entry.model_dump() for entry in transcript],
            "bot_mention_source_content": source_content,
            "bot_mention_retry_count": 0,
        }

        try:
            final_state = await asyncio.wait_for(
                self.graph.ainvoke(initial_state),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise ReplyGenerationError(
                f"GENERATION_TIMEOUT: no reply within {self.timeout_seconds}s"
            ) from e
        except Exception as e:
            raise ReplyGenerationError(f"GENERATION_FAILED: {e}") from e

        error = final_state.get("bot_mention_error")
        if error:
            raise ReplyGenerationError(error)

        response = (final_state.get("bot_mention_response") or "").strip()
        if not response:
            raise ReplyGenerationError("EMPTY_RESPONSE")

        logger.info(
            f"[GraphReplyGenerator] Reply generated: {len(response)} chars, "
            f"retries={final_state.get('bot_mention_retry_count', 0)}"
        )
        return response

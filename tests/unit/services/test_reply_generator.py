"""GraphReplyGenerator 테스트 (그래프는 mock)"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from vrsa_discussion.models.thread import ThreadTranscriptEntry
from vrsa_discussion.services.reply_generator import GraphReplyGenerator, ReplyGenerationError


@pytest.fixture
def transcript():
    return [ThreadTranscriptEntry(author_name="Alice", content="Reply please @vrsabot")]


class TestGraphReplyGenerator:
    """GraphReplyGenerator 테스트"""

    @pytest.mark.asyncio
    async def test_generate_reply_success(self, transcript):
        """그래프 최종 응답 반환 + 초기 상태 구성"""
        graph = AsyncMock()
        graph.ainvoke.return_value = {"bot_mention_response": " Yo! What's up? "}
        generator = GraphReplyGenerator(graph=graph, timeout_seconds=1)

        reply = await generator.generate_reply(transcript, "new verse")

        assert reply == "Yo! What's up?"
        state = graph.ainvoke.call_args.args[0]
        assert state["bot_mention_source_content"] == "new verse"
        assert state["bot_mention_transcript"] == [
            {"author_name": "Alice", "content": "Reply please @vrsabot", "is_automated": False}
        ]
        assert state["bot_mention_retry_count"] == 0

    @pytest.mark.asyncio
    async def test_generate_reply_workflow_error(self, transcript):
        """워크플로우가 에러 상태로 끝나면 예외"""
        graph = AsyncMock()
        graph.ainvoke.return_value = {"bot_mention_error": "GENERATION_FAILED: quota"}
        generator = GraphReplyGenerator(graph=graph, timeout_seconds=1)

        with pytest.raises(ReplyGenerationError, match="quota"):
            await generator.generate_reply(transcript, "")

    @pytest.mark.asyncio
    async def test_generate_reply_empty(self, transcript):
        """빈 응답은 예외"""
        graph = AsyncMock()
        graph.ainvoke.return_value = {"bot_mention_response": "  "}
        generator = GraphReplyGenerator(graph=graph, timeout_seconds=1)

        with pytest.raises(ReplyGenerationError, match="EMPTY_RESPONSE"):
            await generator.generate_reply(transcript, "")

    @pytest.mark.asyncio
    async def test_generate_reply_timeout(self, transcript):
        """제한 시간 초과"""

        async def slow(*args, **kwargs):
            await asyncio.sleep(1)
            return {"bot_mention_response": "too late"}

        graph = AsyncMock()
        graph.ainvoke.side_effect = slow
        generator = GraphReplyGenerator(graph=graph, timeout_seconds=0.01)

        with pytest.raises(ReplyGenerationError, match="GENERATION_TIMEOUT"):
            await generator.generate_reply(transcript, "")

    @pytest.mark.asyncio
    async def test_generate_reply_graph_exception(self, transcript):
        """그래프 예외는 ReplyGenerationError로 변환"""
        graph = AsyncMock()
        graph.ainvoke.side_effect = RuntimeError("graph exploded")
        generator = GraphReplyGenerator(graph=graph, timeout_seconds=1)

        with pytest.raises(ReplyGenerationError) as exc_info:
            await generator.generate_reply(transcript, "")

        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_default_graph_and_timeout(self):
        """기본값: 컴파일된 bot_mention 그래프 + 설정 타임아웃"""
        from vrsa_discussion.infrastructure.graph.config import get_graph_settings
        from vrsa_discussion.infrastructure.graph.workflows.bot_mention import bot_mention_graph

        generator = GraphReplyGenerator()

        assert generator.graph is bot_mention_graph
        assert generator.timeout_seconds == get_graph_settings().request_timeout

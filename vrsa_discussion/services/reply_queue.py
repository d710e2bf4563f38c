"""ARQ 기반 봇 응답 디스패처 (서버 측 실행 모드)

로컬 태스크 대신 process_bot_mention 태스크를 큐잉한다.
응답은 다음 전체 로드 시 트리에 나타난다.
"""

import logging
from urllib.parse import urlparse

from arq import create_pool
from arq.connections import ArqRedis, RedisSettings

from vrsa_discussion.core.config import get_settings
from vrsa_discussion.core.telemetry import get_discussion_metrics

logger = logging.getLogger(__name__)


def get_redis_settings() -> RedisSettings:
    """ARQ Redis 연결 설정"""
    settings = get_settings()
    parsed = urlparse(settings.arq_redis_url)

    return RedisSettings(
        host=parsed.hostname or "localhost",
        port=parsed.port or 6379,
        database=int(parsed.path.lstrip("/") or "0"),
        password=parsed.password,
    )


async def get_arq_pool() -> ArqRedis:
    """ARQ Redis 연결 풀"""
    return await create_pool(get_redis_settings())


class QueuedReplyDispatcher:
    """봇 응답 작업을 ARQ 워커에 위임"""

    def __init__(self, debounce_seconds: float | None = None):
        self.debounce_seconds = (
            debounce_seconds
            if debounce_seconds is not None
            else get_settings().bot_reply_debounce_seconds
        )

    async def schedule(self, view, trigger_id: str) -> None:
        """process_bot_mention 태스크 큐잉 (best-effort)

        디바운스는 ARQ의 지연 실행(_defer_by)으로 대신한다.
        """
        try:
            pool = await get_arq_pool()
            try:
                await pool.enqueue_job(
                    "process_bot_mention",
                    subject_id=view.subject_id,
                    comment_id=trigger_id,
                    source_content=view.source_content,
                    _defer_by=self.debounce_seconds,
                )
            finally:
                await pool.close()

            metrics = get_discussion_metrics()
            if metrics:
                metrics.arq_task_enqueue_total.add(1, {"task_name": "process_bot_mention"})

            logger.info(f"bot_mention_task enqueued: comment={trigger_id}")
        except Exception as e:
            # 큐잉 실패해도 댓글 작성은 성공으로 처리 (best-effort)
            logger.error(f"Failed to enqueue bot_mention_task: {e}")

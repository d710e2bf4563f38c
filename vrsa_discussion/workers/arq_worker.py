"""ARQ Worker 설정 및 태스크 정의 (OTel 계측 포함)"""

import logging
import time
from functools import wraps
from typing import Any, Callable, TypeVar

from opentelemetry import trace

from vrsa_discussion.constants.agents import build_agent_registry
from vrsa_discussion.core.config import get_settings
from vrsa_discussion.core.telemetry import get_discussion_metrics, get_tracer, setup_telemetry
from vrsa_discussion.repositories.comments import create_comment_repository
from vrsa_discussion.services.comment_tree import build_forest
from vrsa_discussion.services.reply_generator import GraphReplyGenerator
from vrsa_discussion.services.reply_orchestrator import generate_bot_reply
from vrsa_discussion.services.reply_queue import get_redis_settings
from vrsa_discussion.services.thread_context import build_transcript

logger = logging.getLogger(__name__)

T = TypeVar("T")


def traced_task(task_name: str) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """ARQ 태스크에 OTel 트레이싱 + 메트릭 추가 데코레이터"""
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        async def wrapper(ctx: dict, *args: Any, **kwargs: Any) -> T:
            tracer = get_tracer()
            metrics = get_discussion_metrics()

            with tracer.start_as_current_span(
                f"arq.task.{task_name}",
                kind=trace.SpanKind.CONSUMER,
            ) as span:
                span.set_attribute("arq.task.name", task_name)
                span.set_attribute("arq.task.args", str(kwargs or args)[:200])

                start_time = time.perf_counter()
                try:
                    result = await func(ctx, *args, **kwargs)

                    status = "success"
                    if isinstance(result, dict):
                        status = result.get("status", status)
                    span.set_attribute("arq.task.status", status)
                    if metrics:
                        metrics.arq_task_result.add(
                            1, {"task_name": task_name, "status": status}
                        )
                    return result

                except Exception as e:
                    span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                    span.record_exception(e)
                    if metrics:
                        metrics.arq_task_result.add(
                            1, {"task_name": task_name, "status": "failed"}
                        )
                    raise

                finally:
                    duration = time.perf_counter() - start_time
                    if metrics:
                        metrics.arq_task_duration.record(
                            duration, {"task_name": task_name}
                        )

        return wrapper  # type: ignore
    return decorator


@traced_task("process_bot_mention")
async def process_bot_mention(
    ctx: dict, subject_id: str, comment_id: str, source_content: str = ""
) -> dict:
    """봇 멘션 처리 태스크

    대상의 댓글을 다시 읽어 forest를 구성하고,
    트리거 댓글까지의 대화록으로 응답을 생성해 대댓글로 저장합니다.

    Args:
        ctx: ARQ 컨텍스트 (startup에서 repository/generator 주입)
        subject_id: 대상(게시물) ID
        comment_id: 트리거 댓글 ID
        source_content: 원본 게시물 내용

    Returns:
        dict: 작업 결과
    """
    logger.info(f"[process_bot_mention] Starting: comment={comment_id}")

    repository = ctx.get("repository") or create_comment_repository()
    generator = ctx.get("generator") or GraphReplyGenerator()
    agent = build_agent_registry(get_settings()).default

    if agent is None:
        logger.error("[process_bot_mention] No automated participant configured")
        return {"status": "error", "message": "No automated participant configured"}

    try:
        # 1. 대화록 재구성 (현재 저장소 상태 기준)
        records = await repository.list_comments(subject_id)
        transcript = build_transcript(build_forest(records), comment_id)

        if not transcript:
            logger.warning(f"[process_bot_mention] Comment not found: {comment_id}")
            return {"status": "error", "message": "Comment not found", "comment_id": comment_id}

        # 2. 응답 생성 + 대댓글 저장
        reply = await generate_bot_reply(
            repository,
            generator,
            agent,
            subject_id,
            comment_id,
            transcript,
            source_content,
        )

        logger.info(f"[process_bot_mention] Reply created: {reply.id}")

        return {
            "status": "success",
            "comment_id": comment_id,
            "reply_id": reply.id,
            "response": reply.content,
        }

    except Exception as e:
        # 실패한 봇 응답은 재시도하지 않는다
        logger.exception(f"[process_bot_mention] Failed: comment={comment_id}")
        return {
            "status": "failed",
            "comment_id": comment_id,
            "error": str(e),
        }


async def startup(ctx: dict) -> None:
    """Worker 시작 시 Telemetry 초기화 및 공유 의존성 준비"""
    setup_telemetry("vrsa-arq-worker", "0.1.0")
    ctx["repository"] = create_comment_repository()
    ctx["generator"] = GraphReplyGenerator()
    logger.info("ARQ Worker started with telemetry")


async def shutdown(ctx: dict) -> None:
    """Worker 종료 시 DB 커넥션 풀 정리"""
    if not get_settings().use_mock_store:
        from vrsa_discussion.core.database import dispose_engine

        await dispose_engine()
    logger.info("ARQ Worker shutting down")


class WorkerSettings:
    """ARQ Worker 설정"""

    # 등록된 태스크 함수
    functions = [
        process_bot_mention,
    ]

    # Redis 연결 설정 (arq는 인스턴스를 기대)
    redis_settings = get_redis_settings()

    # 라이프사이클 콜백
    on_startup = startup
    on_shutdown = shutdown

    # Worker 설정
    max_tries = 1                    # 봇 응답은 재시도하지 않음
    job_timeout = 120                # 작업 타임아웃 (생성 타임아웃 + 저장 여유)
    keep_result = 3600               # 결과 보관 시간 (1시간)
    health_check_interval = 60       # 헬스체크 간격 (60초)

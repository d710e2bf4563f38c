"""봇 자동 응답 오케스트레이터

자동 참여자 멘션이 감지된 댓글마다 독립된 asyncio 태스크로
디바운스 → 대화록 구성 → 응답 생성 → 저장 → 로컬 트리 반영을 수행한다.

상태 전이:
    IDLE → SCHEDULED → GENERATING → DONE
                 ↘           ↘
                  FAILED      FAILED

실패는 로그/메트릭으로만 관찰되며 호출자에게 전파되지 않는다.
"""

import asyncio
import logging
import time
from enum import Enum
from typing import Protocol

from vrsa_discussion.constants.agents import AutomatedParticipant
from vrsa_discussion.core.telemetry import get_discussion_metrics
from vrsa_discussion.models.thread import CommentRecord, ThreadTranscriptEntry
from vrsa_discussion.repositories.comments.interface import ICommentStore
from vrsa_discussion.services.comment_tree import Forest
from vrsa_discussion.services.reply_generator import ReplyGenerator
from vrsa_discussion.services.thread_context import build_transcript

logger = logging.getLogger(__name__)


class ReplyJobState(str, Enum):
    """봇 응답 작업 상태"""

    IDLE = "idle"
    SCHEDULED = "scheduled"
    GENERATING = "generating"
    DONE = "done"
    FAILED = "failed"


TERMINAL_STATES = frozenset({ReplyJobState.DONE, ReplyJobState.FAILED})

_ALLOWED_TRANSITIONS = {
    ReplyJobState.IDLE: {ReplyJobState.SCHEDULED},
    ReplyJobState.SCHEDULED: {ReplyJobState.GENERATING, ReplyJobState.FAILED},
    ReplyJobState.GENERATING: {ReplyJobState.DONE, ReplyJobState.FAILED},
    ReplyJobState.DONE: set(),
    ReplyJobState.FAILED: set(),
}


class TriggerNotFoundError(Exception):
    """응답 대상 댓글이 생성 전에 사라짐"""


class ReplyView(Protocol):
    """응답을 반영할 토론 뷰 (forest 소유자)"""

    @property
    def subject_id(self) -> str: ...

    @property
    def source_content(self) -> str: ...

    @property
    def forest(self) -> Forest: ...

    @property
    def is_active(self) -> bool: ...

    def apply_reply(self, record: CommentRecord) -> None: ...


class ReplyJob:
    """트리거 댓글 하나에 대한 봇 응답 작업

    wait()은 DONE/FAILED 도달 시 반환된다.
    """

    def __init__(self, subject_id: str, trigger_id: str):
        self.subject_id = subject_id
        self.trigger_id = trigger_id
        self.state = ReplyJobState.IDLE
        self.history: list[ReplyJobState] = [ReplyJobState.IDLE]
        self.transcript: list[ThreadTranscriptEntry] = []
        self.reply: CommentRecord | None = None
        self.error: str | None = None
        self._finished = asyncio.Event()

    def __repr__(self) -> str:
        return f"<ReplyJob trigger={self.trigger_id} state={self.state.value}>"

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    def transition(self, state: ReplyJobState) -> None:
        if state not in _ALLOWED_TRANSITIONS[self.state]:
            raise ValueError(f"Invalid transition: {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)
        if state in TERMINAL_STATES:
            self._finished.set()

    async def wait(self) -> ReplyJobState:
        """종료 상태까지 대기 후 최종 상태 반환"""
        await self._finished.wait()
        return self.state


async def generate_bot_reply(
    store: ICommentStore,
    generator: ReplyGenerator,
    agent: AutomatedParticipant,
    subject_id: str,
    trigger_id: str,
    transcript: list[ThreadTranscriptEntry],
    source_content: str,
) -> CommentRecord:
    """응답 생성 후 트리거 댓글의 대댓글로 저장

    클라이언트 오케스트레이터와 ARQ 워커가 공유하는 파이프라인.
    생성/저장 실패는 그대로 전파된다.
    """
    content = await generator.generate_reply(transcript, source_content)
    return await store.create_comment(
        subject_id=subject_id,
        content=content,
        parent_id=trigger_id,
        author_id=None,
        is_automated=True,
        automated_name=agent.display_name,
    )


class AutomatedReplyOrchestrator:
    """봇 응답 작업 스케줄러 (프로세스 내 실행)"""

    def __init__(
        self,
        store: ICommentStore,
        generator: ReplyGenerator,
        agent: AutomatedParticipant,
        debounce_seconds: float = 1.0,
        max_finished_jobs: int = 50,
    ):
        self.store = store
        self.generator = generator
        self.agent = agent
        self.debounce_seconds = debounce_seconds
        self.max_finished_jobs = max_finished_jobs
        self._jobs: list[ReplyJob] = []
        self._tasks: set[asyncio.Task] = set()

    @property
    def jobs(self) -> list[ReplyJob]:
        return list(self._jobs)

    async def schedule(self, view: ReplyView, trigger_id: str) -> ReplyJob:
        """트리거 댓글에 대한 응답 작업 예약 (즉시 반환)"""
        job = ReplyJob(view.subject_id, trigger_id)
        job.transition(ReplyJobState.SCHEDULED)

        task = asyncio.create_task(self._run(job, view))
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        self._jobs.append(job)

        logger.info(f"Bot reply scheduled: subject={job.subject_id}, trigger={trigger_id}")
        return job

    async def drain(self) -> None:
        """진행 중인 모든 작업 종료 대기"""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        self._prune_finished_jobs()

    def _prune_finished_jobs(self) -> None:
        """오래된 종료 작업부터 버리고 최근 max_finished_jobs개만 유지 (진행 중 작업은 유지)"""
        finished = [job for job in self._jobs if job.is_terminal]
        overflow = len(finished) - self.max_finished_jobs
        if overflow <= 0:
            return
        dropped = set(finished[:overflow])
        self._jobs = [job for job in self._jobs if job not in dropped]

    async def _run(self, job: ReplyJob, view: ReplyView) -> None:
        started = time.perf_counter()
        try:
            await asyncio.sleep(self.debounce_seconds)

            # 디바운스 종료 시점의 forest 기준으로 대화록 구성
            transcript = build_transcript(view.forest, job.trigger_id)
            if not transcript:
                raise TriggerNotFoundError(f"Trigger comment not found: {job.trigger_id}")

            job.transcript = transcript
            job.transition(ReplyJobState.GENERATING)

            record = await generate_bot_reply(
                self.store,
                self.generator,
                self.agent,
                job.subject_id,
                job.trigger_id,
                transcript,
                view.source_content,
            )
            job.reply = record

            if view.is_active:
                view.apply_reply(record)
            else:
                logger.info(
                    f"[AutomatedReplyOrchestrator] View closed, local insert dropped: reply={record.id}"
                )

            job.transition(ReplyJobState.DONE)
            logger.info(f"Bot reply created: trigger={job.trigger_id}, reply={record.id}")

        except asyncio.CancelledError:
            job.error = "CANCELLED"
            job.transition(ReplyJobState.FAILED)
            raise

        except Exception as e:
            # 실패는 사용자에게 노출하지 않는다 (트리거 댓글은 그대로 유지)
            job.error = str(e)
            job.transition(ReplyJobState.FAILED)
            logger.warning(
                f"[AutomatedReplyOrchestrator] Bot reply failed: trigger={job.trigger_id}, "
                f"error={type(e).__name__}: {e}"
            )

        finally:
            metrics = get_discussion_metrics()
            if metrics:
                metrics.bot_reply_jobs_total.add(1, {"status": job.state.value})
                metrics.bot_reply_duration.record(
                    time.perf_counter() - started, {"status": job.state.value}
                )

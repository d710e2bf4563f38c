"""토론(댓글 스레드) 서비스

하나의 대상(subject)에 대한 댓글 forest를 소유하는 뷰.
댓글 작성/삭제는 저장소 성공 후 로컬 forest에 즉시 반영되고,
자동 참여자 멘션이 있으면 봇 응답 작업을 예약한다.
"""

import logging
from typing import Protocol

from vrsa_discussion.core.config import Settings, get_settings
from vrsa_discussion.models.thread import CommentNode, CommentRecord
from vrsa_discussion.repositories.comments.interface import ICommentStore, INotificationSink
from vrsa_discussion.services.comment_tree import (
    EMPTY_FOREST,
    Forest,
    build_forest,
    count_nodes,
    depth_of,
    insert_reply,
    insert_root,
    remove_node,
    to_nodes,
)
from vrsa_discussion.services.mention_service import HandleResolver, mentioned_handles
from vrsa_discussion.services.reply_orchestrator import ReplyJob

logger = logging.getLogger(__name__)

MENTION_SOURCE_TYPE = "post_comment"


class ReplyDispatcher(Protocol):
    """봇 응답 예약 (프로세스 내 오케스트레이터 또는 ARQ 디스패처)"""

    async def schedule(self, view, trigger_id: str) -> ReplyJob | None: ...


class DiscussionService:
    """대상 하나의 댓글 스레드 뷰"""

    def __init__(
        self,
        subject_id: str,
        store: ICommentStore,
        resolver: HandleResolver,
        dispatcher: ReplyDispatcher | None = None,
        notifier: INotificationSink | None = None,
        source_content: str = "",
        settings: Settings | None = None,
    ):
        self._subject_id = subject_id
        self._source_content = source_content
        self.store = store
        self.resolver = resolver
        self.dispatcher = dispatcher
        self.notifier = notifier
        self.settings = settings or get_settings()
        self._forest: Forest = EMPTY_FOREST
        self._active = True

    # =========================================================================
    # View 상태
    # =========================================================================

    @property
    def subject_id(self) -> str:
        return self._subject_id

    @property
    def source_content(self) -> str:
        return self._source_content

    @property
    def forest(self) -> Forest:
        return self._forest

    @property
    def is_active(self) -> bool:
        return self._active

    def close(self) -> None:
        """뷰 종료 (이후 도착하는 봇 응답은 로컬에 반영하지 않음)"""
        self._active = False
        logger.info(f"Discussion closed: subject={self._subject_id}")

    async def load(self) -> Forest:
        """저장소에서 전체 댓글을 읽어 forest 재구성"""
        records = await self.store.list_comments(self._subject_id)
        self._forest = build_forest(records)
        logger.info(
            f"Discussion loaded: subject={self._subject_id}, comments={len(self._forest)}"
        )
        return self._forest

    def count(self) -> int:
        return count_nodes(self._forest)

    def nodes(self) -> list[CommentNode]:
        """렌더링용 중첩 노드"""
        return to_nodes(self._forest)

    def can_reply(self, comment_id: str) -> bool:
        """대댓글 작성 가능 여부 (depth 제한)"""
        depth = depth_of(self._forest, comment_id)
        return depth is not None and depth < self.settings.max_reply_depth

    def apply_reply(self, record: CommentRecord) -> None:
        """저장된 레코드를 로컬 forest에 반영

        부모가 이미 삭제되었으면 no-op.
        """
        node = CommentNode(record=record)
        if record.parent_id is None:
            self._forest = insert_root(self._forest, node)
        else:
            self._forest = insert_reply(self._forest, record.parent_id, node)

    # =========================================================================
    # 사용자 동작
    # =========================================================================

    async def on_comment_submitted(
        self,
        body: str,
        author_id: str,
        parent_id: str | None = None,
        author_name: str | None = None,
    ) -> CommentNode:
        """댓글 작성 + 멘션 처리

        저장소 실패는 호출자에게 전파된다.
        멘션 해석/알림/봇 예약 실패는 작성 결과에 영향을 주지 않는다.
        """
        content = (body or "").strip()
        if not content:
            raise ValueError("EMPTY_COMMENT")
        if not self._active:
            raise ValueError("DISCUSSION_CLOSED")
        if parent_id is not None:
            if parent_id not in self._forest:
                raise ValueError("COMMENT_NOT_FOUND")
            if not self.can_reply(parent_id):
                raise ValueError("REPLY_DEPTH_EXCEEDED")

        record = await self.store.create_comment(
            subject_id=self._subject_id,
            content=content,
            parent_id=parent_id,
            author_id=author_id,
        )
        if record.author_name is None and author_name:
            record = record.model_copy(update={"author_name": author_name})

        self.apply_reply(record)
        logger.info(f"Comment created: comment={record.id}, subject={self._subject_id}")

        await self._handle_mentions(record)

        return CommentNode(record=record)

    async def delete_comment(self, comment_id: str, user_id: str) -> bool:
        """댓글 삭제 (작성자만 가능, 하위 댓글 포함)"""
        record = self._forest.get(comment_id)
        if record is None:
            raise ValueError("COMMENT_NOT_FOUND")
        if record.is_automated or record.author_id != user_id:
            raise ValueError("PERMISSION_DENIED")

        deleted = await self.store.delete_comment(comment_id)
        # 저장소에 이미 없어도 로컬에서는 제거한다
        self._forest = remove_node(self._forest, comment_id)

        if deleted:
            logger.info(f"Comment deleted: comment={comment_id}, user={user_id}")
        else:
            logger.info(f"Comment already gone from store: comment={comment_id}")
        return deleted

    # =========================================================================
    # 멘션 처리
    # =========================================================================

    async def _handle_mentions(self, record: CommentRecord) -> None:
        handles = mentioned_handles(record.content)
        if not handles:
            return

        resolved = await self.resolver.resolve_handles(handles)

        mentions_bot = False
        for identity in resolved.values():
            if identity is None:
                continue
            if identity.is_automated:
                mentions_bot = True
            elif identity.id != record.author_id:
                await self._notify_mention(identity.handle, record)

        if mentions_bot and self.dispatcher is not None:
            try:
                await self.dispatcher.schedule(self, record.id)
            except Exception as e:
                logger.error(f"Failed to schedule bot reply: comment={record.id}, error={e}")

    async def _notify_mention(self, handle: str, record: CommentRecord) -> None:
        """멘션 알림 (best-effort)"""
        if self.notifier is None or record.author_id is None:
            return
        try:
            await self.notifier.notify_mention(
                handle, MENTION_SOURCE_TYPE, record.id, record.author_id
            )
        except Exception as e:
            logger.warning(f"Failed to notify mention: handle={handle}, error={e}")


def create_discussion_service(
    subject_id: str,
    source_content: str = "",
    use_queue: bool = False,
    settings: Settings | None = None,
) -> DiscussionService:
    """설정 기반 DiscussionService 구성

    use_queue=True면 봇 응답을 ARQ 워커에 위임하고,
    아니면 프로세스 내 오케스트레이터가 처리한다.
    """
    from vrsa_discussion.constants.agents import build_agent_registry
    from vrsa_discussion.repositories.comments import create_comment_repository
    from vrsa_discussion.services.reply_generator import GraphReplyGenerator
    from vrsa_discussion.services.reply_orchestrator import AutomatedReplyOrchestrator
    from vrsa_discussion.services.reply_queue import QueuedReplyDispatcher

    settings = settings or get_settings()
    repository = create_comment_repository()
    registry = build_agent_registry(settings)

    dispatcher: ReplyDispatcher | None = None
    if registry.default is not None:
        if use_queue:
            dispatcher = QueuedReplyDispatcher(settings.bot_reply_debounce_seconds)
        else:
            dispatcher = AutomatedReplyOrchestrator(
                store=repository,
                generator=GraphReplyGenerator(),
                agent=registry.default,
                debounce_seconds=settings.bot_reply_debounce_seconds,
            )

    return DiscussionService(
        subject_id=subject_id,
        store=repository,
        resolver=HandleResolver(repository, registry),
        dispatcher=dispatcher,
        notifier=repository,
        source_content=source_content,
        settings=settings,
    )

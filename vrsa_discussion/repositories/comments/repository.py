"""PostgreSQL 댓글 Repository

SQLAlchemy async 기반 댓글/프로필/알림 저장소.
작업마다 새 세션을 열어, 동시에 실행되는 봇 응답 작업과 세션을 공유하지 않는다.
"""

import logging
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from vrsa_discussion.models.comment import PostComment
from vrsa_discussion.models.notification import Notification, NotificationType
from vrsa_discussion.models.profile import Profile
from vrsa_discussion.models.thread import CommentRecord, ResolvedIdentity

logger = logging.getLogger(__name__)


def _parse_uuid(value: str | None) -> UUID | None:
    """문자열 id → UUID (형식이 잘못되면 None)"""
    if not value:
        return None
    try:
        return UUID(str(value))
    except ValueError:
        return None


def _profile_name(profile: Profile | None) -> str | None:
    if profile is None:
        return None
    return profile.display_name or profile.username


def _to_record(comment: PostComment, author: Profile | None) -> CommentRecord:
    return CommentRecord(
        id=str(comment.id),
        subject_id=comment.post_id,
        parent_id=str(comment.parent_comment_id) if comment.parent_comment_id else None,
        author_id=str(comment.user_id) if comment.user_id else None,
        author_name=_profile_name(author),
        content=comment.content,
        created_at=comment.created_at,
        is_automated=comment.is_bot_comment,
        automated_name=comment.bot_name,
    )


class CommentRepository:
    """PostgreSQL 댓글 Repository"""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self.session_maker = session_maker

    # =========================================================================
    # Comment - 댓글
    # =========================================================================

    async def list_comments(self, subject_id: str) -> list[CommentRecord]:
        """대상의 모든 댓글 조회 (작성자 프로필 포함)"""
        async with self.session_maker() as db:
            query = (
                select(PostComment)
                .options(selectinload(PostComment.author))
                .where(PostComment.post_id == subject_id)
                .order_by(PostComment.created_at)
            )
            result = await db.execute(query)
            comments = result.scalars().all()
            return [_to_record(c, c.author) for c in comments]

    async def create_comment(
        self,
        subject_id: str,
        content: str,
        parent_id: str | None = None,
        author_id: str | None = None,
        is_automated: bool = False,
        automated_name: str | None = None,
    ) -> CommentRecord:
        """댓글 생성"""
        parent_uuid = _parse_uuid(parent_id)
        if parent_id is not None and parent_uuid is None:
            raise ValueError(f"Invalid parent comment id: {parent_id}")

        async with self.session_maker() as db:
            comment = PostComment(
                post_id=subject_id,
                parent_comment_id=parent_uuid,
                user_id=_parse_uuid(author_id),
                content=content,
                is_bot_comment=is_automated,
                bot_name=automated_name if is_automated else None,
            )
            db.add(comment)
            await db.commit()
            await db.refresh(comment)

            author = await db.get(Profile, comment.user_id) if comment.user_id else None
            return _to_record(comment, author)

    async def delete_comment(self, comment_id: str) -> bool:
        """댓글 삭제 (하위 댓글은 FK CASCADE)"""
        comment_uuid = _parse_uuid(comment_id)
        if comment_uuid is None:
            return False

        async with self.session_maker() as db:
            result = await db.execute(
                delete(PostComment)
                .where(PostComment.id == comment_uuid)
                .returning(PostComment.id)
            )
            deleted = result.scalar_one_or_none()
            await db.commit()
            return deleted is not None

    # =========================================================================
    # Profile - 멘션 핸들 조회
    # =========================================================================

    async def find_by_usernames(self, usernames: list[str]) -> dict[str, ResolvedIdentity]:
        """핸들 일괄 조회 (IN 쿼리 한 번)"""
        if not usernames:
            return {}

        async with self.session_maker() as db:
            result = await db.execute(select(Profile).where(Profile.username.in_(usernames)))
            profiles = result.scalars().all()
            return {
                p.username: ResolvedIdentity(
                    id=str(p.id),
                    handle=p.username,
                    display_name=_profile_name(p),
                )
                for p in profiles
            }

    # =========================================================================
    # Notification - 알림
    # =========================================================================

    async def notify_mention(
        self, handle: str, source_type: str, source_id: str, by_user_id: str
    ) -> None:
        """멘션 알림 생성 (자기 자신 멘션은 제외)"""
        async with self.session_maker() as db:
            result = await db.execute(select(Profile).where(Profile.username == handle))
            target = result.scalar_one_or_none()
            if target is None or str(target.id) == str(by_user_id):
                return

            db.add(
                Notification(
                    user_id=target.id,
                    actor_id=_parse_uuid(by_user_id),
                    type=NotificationType.MENTION.value,
                    source_type=source_type,
                    source_id=source_id,
                )
            )
            await db.commit()
            logger.debug(f"Mention notification created: user={target.id}, source={source_id}")

"""댓글 Repository 패키지

댓글 저장소, 멘션 핸들 디렉터리, 알림 전달을 묶는다.
"""

from vrsa_discussion.repositories.comments.interface import (
    ICommentStore,
    INotificationSink,
    IUserDirectory,
)
from vrsa_discussion.repositories.comments.mock_repository import MockCommentRepository
from vrsa_discussion.repositories.comments.repository import CommentRepository


def create_comment_repository() -> CommentRepository | MockCommentRepository:
    """댓글 Repository 팩토리

    환경 설정에 따라 실제/Mock 저장소 반환.
    반환값은 ICommentStore, IUserDirectory, INotificationSink를 모두 구현한다.
    """
    from vrsa_discussion.core.config import get_settings

    if get_settings().use_mock_store:
        return MockCommentRepository()

    from vrsa_discussion.core.database import async_session_maker

    return CommentRepository(async_session_maker)


__all__ = [
    "ICommentStore",
    "IUserDirectory",
    "INotificationSink",
    "CommentRepository",
    "MockCommentRepository",
    "create_comment_repository",
]

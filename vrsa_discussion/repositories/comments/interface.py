"""댓글 Repository 인터페이스 정의

Protocol 기반 인터페이스로 구조적 서브타이핑 지원
"""

from typing import Protocol

from vrsa_discussion.models.thread import CommentRecord, ResolvedIdentity


class ICommentStore(Protocol):
    """댓글 레코드 저장소

    CommentRepository와 MockCommentRepository가 구현하는 공통 인터페이스.
    """

    async def list_comments(self, subject_id: str) -> list[CommentRecord]:
        """대상의 모든 댓글 조회 (모든 depth, flat)"""
        ...

    async def create_comment(
        self,
        subject_id: str,
        content: str,
        parent_id: str | None = None,
        author_id: str | None = None,
        is_automated: bool = False,
        automated_name: str | None = None,
    ) -> CommentRecord:
        """댓글 생성

        parent_id가 있으면 대댓글로 생성된다.
        봇 댓글은 author_id 없이 is_automated=True로 생성된다.
        """
        ...

    async def delete_comment(self, comment_id: str) -> bool:
        """댓글 삭제 (하위 댓글 CASCADE)

        Returns:
            bool: 삭제 여부 (없는 댓글이면 False)
        """
        ...


class IUserDirectory(Protocol):
    """멘션 핸들 → 사용자 조회"""

    async def find_by_usernames(self, usernames: list[str]) -> dict[str, ResolvedIdentity]:
        """여러 핸들을 한 번의 왕복으로 조회 (없는 핸들은 결과에서 제외)"""
        ...


class INotificationSink(Protocol):
    """멘션 알림 전달"""

    async def notify_mention(
        self, handle: str, source_type: str, source_id: str, by_user_id: str
    ) -> None:
        """멘션 알림 생성 (fire-and-forget)"""
        ...

"""Mock 댓글 Repository

테스트/로컬 실행용 인메모리 댓글 저장소.
"""

import copy
from datetime import datetime, timedelta, timezone
from uuid import uuid4

from vrsa_discussion.models.thread import CommentRecord, ResolvedIdentity

# =============================================================================
# Mock 데이터 저장소
# =============================================================================

MOCK_DATA = {
    "profiles": {
        "user-1": {
            "id": "user-1",
            "username": "alice",
            "display_name": "Alice",
        },
        "user-2": {
            "id": "user-2",
            "username": "bob_2",
            "display_name": "Bob",
        },
        "user-3": {
            "id": "user-3",
            "username": "carol",
            "display_name": None,
        },
    },
    "comments": {
        "comment-1": {
            "id": "comment-1",
            "post_id": "post-1",
            "parent_comment_id": None,
            "user_id": "user-1",
            "content": "This hook is unreal",
            "is_bot_comment": False,
            "bot_name": None,
            "created_at": "2026-01-20T09:00:00+00:00",
        },
        "comment-2": {
            "id": "comment-2",
            "post_id": "post-1",
            "parent_comment_id": "comment-1",
            "user_id": "user-2",
            "content": "Agreed, the second verse though",
            "is_bot_comment": False,
            "bot_name": None,
            "created_at": "2026-01-20T09:05:00+00:00",
        },
        "comment-3": {
            "id": "comment-3",
            "post_id": "post-1",
            "parent_comment_id": "comment-2",
            "user_id": None,
            "content": "The second verse is carrying the whole track fr",
            "is_bot_comment": True,
            "bot_name": "VRSA Bot",
            "created_at": "2026-01-20T09:06:00+00:00",
        },
        "comment-4": {
            "id": "comment-4",
            "post_id": "post-1",
            "parent_comment_id": None,
            "user_id": "user-3",
            "content": "Needs more bass",
            "is_bot_comment": False,
            "bot_name": None,
            "created_at": "2026-01-20T10:00:00+00:00",
        },
        "comment-5": {
            "id": "comment-5",
            "post_id": "post-2",
            "parent_comment_id": None,
            "user_id": "user-2",
            "content": "First!",
            "is_bot_comment": False,
            "bot_name": None,
            "created_at": "2026-01-21T08:00:00+00:00",
        },
    },
    "notifications": [],
}


def _copy_mock_data() -> dict:
    """Mock 데이터 깊은 복사"""
    return copy.deepcopy(MOCK_DATA)


# =============================================================================
# MockCommentRepository
# =============================================================================


class MockCommentRepository:
    """테스트용 Mock 댓글 Repository (저장소 + 디렉터리 + 알림)"""

    def __init__(self, data: dict | None = None):
        self.data = data if data is not None else _copy_mock_data()
        self._last_created_at: datetime | None = None

    def _to_record(self, row: dict) -> CommentRecord:
        created_at = row.get("created_at")
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)

        profile = self.data["profiles"].get(row.get("user_id") or "")
        author_name = None
        if profile:
            author_name = profile.get("display_name") or profile.get("username")

        return CommentRecord(
            id=row["id"],
            subject_id=row["post_id"],
            parent_id=row.get("parent_comment_id"),
            author_id=row.get("user_id"),
            author_name=author_name,
            content=row.get("content", ""),
            created_at=created_at or datetime.now(timezone.utc),
            is_automated=row.get("is_bot_comment", False),
            automated_name=row.get("bot_name"),
        )

    def _next_created_at(self) -> datetime:
        # 같은 시각 생성 시에도 순서가 유지되도록 단조 증가
        now = datetime.now(timezone.utc)
        if self._last_created_at and now <= self._last_created_at:
            now = self._last_created_at + timedelta(microseconds=1)
        self._last_created_at = now
        return now

    # =========================================================================
    # Comment - 댓글
    # =========================================================================

    async def list_comments(self, subject_id: str) -> list[CommentRecord]:
        """대상의 모든 댓글 조회"""
        return [
            self._to_record(row)
            for row in self.data["comments"].values()
            if row.get("post_id") == subject_id
        ]

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
        if parent_id is not None:
            parent = self.data["comments"].get(parent_id)
            if not parent or parent.get("post_id") != subject_id:
                raise ValueError(f"Comment not found: {parent_id}")

        comment_id = f"comment-{uuid4().hex[:8]}"
        row = {
            "id": comment_id,
            "post_id": subject_id,
            "parent_comment_id": parent_id,
            "user_id": author_id,
            "content": content,
            "is_bot_comment": is_automated,
            "bot_name": automated_name if is_automated else None,
            "created_at": self._next_created_at().isoformat(),
        }
        self.data["comments"][comment_id] = row
        return self._to_record(row)

    async def delete_comment(self, comment_id: str) -> bool:
        """댓글 삭제 (하위 댓글 CASCADE)"""
        if comment_id not in self.data["comments"]:
            return False

        doomed = {comment_id}
        changed = True
        while changed:
            changed = False
            for row in self.data["comments"].values():
                if row["id"] not in doomed and row.get("parent_comment_id") in doomed:
                    doomed.add(row["id"])
                    changed = True

        for cid in doomed:
            del self.data["comments"][cid]
        return True

    # =========================================================================
    # Profile - 멘션 핸들 조회
    # =========================================================================

    async def find_by_usernames(self, usernames: list[str]) -> dict[str, ResolvedIdentity]:
        """핸들 일괄 조회"""
        wanted = set(usernames)
        return {
            p["username"]: ResolvedIdentity(
                id=p["id"],
                handle=p["username"],
                display_name=p.get("display_name") or p["username"],
            )
            for p in self.data["profiles"].values()
            if p["username"] in wanted
        }

    # =========================================================================
    # Notification - 알림
    # =========================================================================

    async def notify_mention(
        self, handle: str, source_type: str, source_id: str, by_user_id: str
    ) -> None:
        """멘션 알림 생성 (자기 자신 멘션은 제외)"""
        target = next(
            (p for p in self.data["profiles"].values() if p["username"] == handle),
            None,
        )
        if not target or target["id"] == by_user_id:
            return

        self.data["notifications"].append(
            {
                "user_id": target["id"],
                "actor_id": by_user_id,
                "type": "mention",
                "source_type": source_type,
                "source_id": source_id,
            }
        )

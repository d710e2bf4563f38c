"""댓글 엔티티"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

DEFAULT_AUTHOR_NAME = "User"
DEFAULT_BOT_NAME = "VRSA Bot"


class CommentRecord(BaseModel):
    """댓글 레코드 (저장소 행)

    대상(subject)에 달린 댓글. 대댓글은 parent_id로 연결.
    봇이 작성한 경우 author_id 없이 is_automated/automated_name을 가진다.
    생성 이후 변경되지 않는다.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    subject_id: str
    content: str
    created_at: datetime
    parent_id: str | None = None  # None이면 최상위 댓글
    author_id: str | None = None
    author_name: str | None = None  # 프로필 조인 결과 (표시용)
    is_automated: bool = False
    automated_name: str | None = None

    @property
    def display_name(self) -> str:
        """화면/대화록에 쓰일 작성자 이름"""
        if self.is_automated:
            return self.automated_name or DEFAULT_BOT_NAME
        return self.author_name or DEFAULT_AUTHOR_NAME


class CommentNode(BaseModel):
    """댓글 트리 노드 (중첩 뷰)

    replies는 삽입 순서(오래된 것 먼저)를 유지한다.
    """

    record: CommentRecord
    replies: list["CommentNode"] = []

    @property
    def id(self) -> str:
        return self.record.id


CommentNode.model_rebuild()

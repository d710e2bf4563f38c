"""게시물 댓글 모델"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vrsa_discussion.core.database import Base


class PostComment(Base):
    """게시물 댓글 모델

    parent_comment_id가 가리키는 부모가 삭제되면 하위 댓글도 함께 삭제된다.
    """

    __tablename__ = "post_comments"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    post_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        index=True,
    )
    parent_comment_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("post_comments.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=True,  # 봇 댓글은 작성자 없음
    )
    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    is_bot_comment: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )
    bot_name: Mapped[str | None] = mapped_column(
        String(50),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    # Relationships
    author = relationship("Profile")

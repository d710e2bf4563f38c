"""토론 스레드 엔티티 모듈

댓글 트리/멘션/대화록용 Pydantic 엔티티 정의.
"""

from vrsa_discussion.models.thread.comment import CommentNode, CommentRecord
from vrsa_discussion.models.thread.mention import MentionToken, ResolvedIdentity
from vrsa_discussion.models.thread.transcript import ThreadTranscriptEntry

__all__ = [
    "CommentRecord",
    "CommentNode",
    "MentionToken",
    "ResolvedIdentity",
    "ThreadTranscriptEntry",
]

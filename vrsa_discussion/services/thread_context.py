"""스레드 대화록 재구성

대상 댓글에서 부모 링크를 따라 루트까지 올라가며
루트 → 대상 순서의 대화록을 만든다.
"""

import logging

from vrsa_discussion.models.thread import ThreadTranscriptEntry
from vrsa_discussion.services.comment_tree import Forest

logger = logging.getLogger(__name__)


def build_transcript(forest: Forest, target_id: str) -> list[ThreadTranscriptEntry]:
    """대상 댓글까지의 대화록 (루트 먼저, 대상 포함)

    없는 id면 빈 목록. 부모 매핑이 손상되어 사이클이 있더라도
    forest 노드 수만큼만 올라가므로 반드시 종료한다.
    """
    if target_id not in forest.records:
        return []

    thread: list[ThreadTranscriptEntry] = []
    visited: set[str] = set()
    current: str | None = target_id
    limit = len(forest.records)

    while current is not None and len(thread) < limit:
        if current in visited:
            logger.warning(f"[build_transcript] Parent cycle detected at comment={current}")
            break
        visited.add(current)

        record = forest.records.get(current)
        if record is None:
            break

        thread.append(
            ThreadTranscriptEntry(
                author_name=record.display_name,
                content=record.content,
                is_automated=record.is_automated,
            )
        )
        current = forest.parents.get(current)

    thread.reverse()
    return thread

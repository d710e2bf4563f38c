"""컨텍스트 수집 노드"""

import logging

from vrsa_discussion.infrastructure.graph.config import get_graph_settings
from vrsa_discussion.infrastructure.graph.workflows.bot_mention.state import (
    BotMentionState,
)

logger = logging.getLogger(__name__)


async def gather_context(state: BotMentionState) -> dict:
    """대화록/게시물 컨텍스트 정리

    Contract:
        reads: bot_mention_transcript, bot_mention_source_content
        writes: bot_mention_gathered_context
        side-effects: None
        failures: None (always succeeds with available data)
    """
    transcript = state.get("bot_mention_transcript") or []
    source_content = state.get("bot_mention_source_content") or ""
    max_entries = get_graph_settings().transcript_max_entries

    # 루트에 가까운 오래된 항목부터 잘라낸다 (트리거 댓글은 항상 포함)
    recent = transcript[-max_entries:] if max_entries > 0 else []

    gathered = {
        "post_content": source_content,
        "thread_lines": [
            f"{entry.get('author_name', 'User')}: {entry.get('content', '')}"
            for entry in recent
        ],
        "mention_content": recent[-1].get("content", "") if recent else "",
    }

    logger.info(
        f"[gather_context] Context gathered: {len(gathered['thread_lines'])} thread lines "
        f"(of {len(transcript)})"
    )

    return {"bot_mention_gathered_context": gathered}

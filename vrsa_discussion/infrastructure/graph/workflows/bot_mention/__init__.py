"""bot_mention 워크플로우 패키지

자동 참여자 멘션에 대한 짧은 대화형 응답 생성
"""

from vrsa_discussion.infrastructure.graph.workflows.bot_mention.graph import (
    bot_mention_graph,
    get_graph,
)
from vrsa_discussion.infrastructure.graph.workflows.bot_mention.state import BotMentionState

__all__ = ["BotMentionState", "get_graph", "bot_mention_graph"]

"""Workflows 패키지"""

from .bot_mention import BotMentionState, get_graph

__all__ = [
    "BotMentionState",
    "get_graph",
]

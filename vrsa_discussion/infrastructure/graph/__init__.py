from vrsa_discussion.infrastructure.graph.config import MAX_RETRY, OPENAI_API_KEY

__all__ = [
    "MAX_RETRY",
    "OPENAI_API_KEY",
]

from vrsa_discussion.infrastructure.graph.integration.llm import (
    get_base_llm,
    get_mention_generator_llm,
)

__all__ = [
    "get_base_llm",
    "get_mention_generator_llm",
]

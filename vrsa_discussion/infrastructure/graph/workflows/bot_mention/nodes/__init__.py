"""bot_mention 노드 export"""

from vrsa_discussion.infrastructure.graph.workflows.bot_mention.nodes.context import (
    gather_context,
)
from vrsa_discussion.infrastructure.graph.workflows.bot_mention.nodes.generation import (
    generate_response,
)
from vrsa_discussion.infrastructure.graph.workflows.bot_mention.nodes.validation import (
    route_validation,
    strip_wrapping_quotes,
    validate_response,
)

__all__ = [
    "gather_context",
    "generate_response",
    "validate_response",
    "route_validation",
    "strip_wrapping_quotes",
]

from vrsa_discussion.constants.agents import (
    AgentRegistry,
    AutomatedParticipant,
    build_agent_registry,
)

__all__ = [
    "AgentRegistry",
    "AutomatedParticipant",
    "build_agent_registry",
]

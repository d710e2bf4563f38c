"""자동 참여자(봇) 상수

멘션 가능한 자동 참여자 정의와 레지스트리.
레지스트리는 설정에서 구성되어 파서/리졸버에 주입된다.
"""

from dataclasses import dataclass

from vrsa_discussion.core.config import Settings


@dataclass(frozen=True)
class AutomatedParticipant:
    """자동 참여자 정의"""

    id: str
    handle: str
    display_name: str
    avatar_url: str | None = None


class AgentRegistry:
    """자동 참여자 레지스트리

    핸들 비교는 대소문자를 구분하지 않는다.
    네트워크 조회 없이 정적으로 해석된다.
    """

    def __init__(self, agents: list[AutomatedParticipant]):
        self._by_handle = {agent.handle.casefold(): agent for agent in agents}

    def __iter__(self):
        return iter(self._by_handle.values())

    def __len__(self) -> int:
        return len(self._by_handle)

    def get(self, handle: str) -> AutomatedParticipant | None:
        """핸들로 자동 참여자 조회"""
        return self._by_handle.get(handle.casefold())

    def is_automated(self, handle: str) -> bool:
        return handle.casefold() in self._by_handle

    @property
    def default(self) -> AutomatedParticipant | None:
        """기본 자동 참여자 (등록 순서상 첫 번째)"""
        return next(iter(self._by_handle.values()), None)


def build_agent_registry(settings: Settings) -> AgentRegistry:
    """설정으로부터 레지스트리 구성

    첫 번째 핸들이 기본 봇이며 표시 이름/아바타를 가진다.
    """
    agents = [
        AutomatedParticipant(
            id=f"bot-{handle.casefold()}",
            handle=handle,
            display_name=settings.bot_display_name if i == 0 else handle,
            avatar_url=settings.bot_avatar_url if i == 0 else None,
        )
        for i, handle in enumerate(settings.automated_handles)
    ]
    return AgentRegistry(agents)

"""자동 참여자 레지스트리 테스트"""

from vrsa_discussion.constants.agents import (
    AgentRegistry,
    AutomatedParticipant,
    build_agent_registry,
)
from vrsa_discussion.core.config import Settings


class TestAgentRegistry:
    """AgentRegistry 테스트"""

    def test_lookup_is_case_insensitive(self, agent_registry):
        """핸들 비교는 대소문자 무시"""
        assert agent_registry.is_automated("vrsabot")
        assert agent_registry.is_automated("VRSABot")
        assert agent_registry.get("VrsaBot").handle == "vrsabot"

    def test_unknown_handle(self, agent_registry):
        """등록되지 않은 핸들"""
        assert agent_registry.get("alice") is None
        assert not agent_registry.is_automated("alice")

    def test_default_is_first_agent(self):
        """첫 번째 등록 참여자가 기본값"""
        registry = AgentRegistry(
            [
                AutomatedParticipant(id="bot-a", handle="a", display_name="A"),
                AutomatedParticipant(id="bot-b", handle="b", display_name="B"),
            ]
        )

        assert registry.default.id == "bot-a"
        assert len(registry) == 2
        assert [agent.handle for agent in registry] == ["a", "b"]

    def test_empty_registry(self):
        """자동 참여자 없음"""
        registry = AgentRegistry([])

        assert registry.default is None
        assert not registry.is_automated("vrsabot")


class TestBuildAgentRegistry:
    """설정 기반 레지스트리 구성"""

    def test_build_from_settings(self):
        """첫 핸들에 봇 표시 이름/아바타 적용"""
        settings = Settings(
            automated_handles=["vrsabot", "helper"],
            bot_display_name="VRSA Bot",
            bot_avatar_url="https://cdn.example.com/bot.png",
        )

        registry = build_agent_registry(settings)

        bot = registry.get("vrsabot")
        assert bot.id == "bot-vrsabot"
        assert bot.display_name == "VRSA Bot"
        assert bot.avatar_url == "https://cdn.example.com/bot.png"

        helper = registry.get("helper")
        assert helper.display_name == "helper"
        assert helper.avatar_url is None

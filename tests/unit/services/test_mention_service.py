"""멘션 파싱/핸들 해석 테스트"""

from unittest.mock import AsyncMock

import pytest

from vrsa_discussion.models.thread import ResolvedIdentity
from vrsa_discussion.repositories.comments.mock_repository import MockCommentRepository
from vrsa_discussion.services.mention_service import (
    HandleResolver,
    mentioned_handles,
    parse_mentions,
)


class TestParseMentions:
    """parse_mentions 테스트"""

    def test_multiple_mentions(self):
        """여러 멘션 추출 (등장 순서)"""
        tokens = parse_mentions("hey @alice and @bob_2 check this")

        assert [t.handle for t in tokens] == ["alice", "bob_2"]
        assert tokens[0].offset == 4
        assert tokens[1].offset == 15

    def test_mention_at_start(self):
        """텍스트 시작의 멘션"""
        tokens = parse_mentions("@vrsabot what do you think")

        assert len(tokens) == 1
        assert tokens[0].handle == "vrsabot"
        assert tokens[0].offset == 0

    def test_email_is_not_a_mention(self):
        """'@' 앞에 공백이 아닌 문자가 있으면 멘션 아님

        '@'만 찾는 단순 스캔이라면 'example.com'을 핸들로 잡는다.
        여기서는 의도적으로 텍스트 시작 또는 공백 뒤의 '@'만 인정한다
        (댓글 입력창 자동완성과 같은 규칙). 이메일 주소로 알림이 가지 않는다.
        """
        assert parse_mentions("email@example.com") == []
        assert parse_mentions("write to me at email@example.com") == []

    def test_empty_and_bare_at(self):
        """빈 입력과 핸들 없는 '@'"""
        assert parse_mentions("") == []
        assert parse_mentions("@") == []
        assert parse_mentions("look @ this") == []

    def test_no_normalization(self):
        """대소문자/구두점 그대로 유지"""
        tokens = parse_mentions("thanks @Alice! and @bob,")

        assert [t.handle for t in tokens] == ["Alice!", "bob,"]

    def test_whitespace_variants(self):
        """개행/탭 뒤의 멘션"""
        tokens = parse_mentions("line one\n@alice\t@bob")

        assert [t.handle for t in tokens] == ["alice", "bob"]

    def test_offsets_are_code_points(self):
        """오프셋은 문자 단위 (바이트 아님)"""
        text = "🔥🔥 @alice"
        tokens = parse_mentions(text)

        assert tokens[0].offset == 3
        assert text[tokens[0].offset] == "@"

    def test_consecutive_at_signs(self):
        """'@@name'은 하나의 토큰 (핸들에 '@' 포함)"""
        tokens = parse_mentions("@@alice")

        assert len(tokens) == 1
        assert tokens[0].handle == "@alice"

    def test_mentioned_handles_dedupes(self):
        """중복 핸들 제거 (순서 유지)"""
        assert mentioned_handles("@bob @alice @bob") == ["bob", "alice"]


class TestHandleResolver:
    """HandleResolver 테스트"""

    @pytest.fixture
    def directory(self):
        return MockCommentRepository()

    @pytest.mark.asyncio
    async def test_resolve_mixed_handles(self, directory, agent_registry):
        """레지스트리 + 디렉터리 + 미존재 핸들"""
        resolver = HandleResolver(directory, agent_registry)

        resolved = await resolver.resolve_handles(["alice", "vrsabot", "ghost"])

        assert resolved["alice"].id == "user-1"
        assert resolved["alice"].is_automated is False
        assert resolved["vrsabot"].is_automated is True
        assert resolved["vrsabot"].display_name == "VRSA Bot"
        assert resolved["ghost"] is None

    @pytest.mark.asyncio
    async def test_single_directory_round_trip(self, agent_registry):
        """디렉터리는 한 번만 호출 (레지스트리 핸들 제외)"""
        directory = AsyncMock()
        directory.find_by_usernames.return_value = {
            "alice": ResolvedIdentity(id="user-1", handle="alice", display_name="Alice"),
        }
        resolver = HandleResolver(directory, agent_registry)

        await resolver.resolve_handles(["alice", "VRSABOT", "bob_2", "alice"])

        directory.find_by_usernames.assert_awaited_once_with(["alice", "bob_2"])

    @pytest.mark.asyncio
    async def test_registry_only_skips_directory(self, agent_registry):
        """자동 참여자만 있으면 네트워크 호출 없음"""
        directory = AsyncMock()
        resolver = HandleResolver(directory, agent_registry)

        resolved = await resolver.resolve_handles(["vrsabot"])

        assert resolved["vrsabot"].is_automated is True
        directory.find_by_usernames.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_directory_failure_degrades_to_not_found(self, agent_registry):
        """디렉터리 장애 시 예외 없이 '없음' (레지스트리 핸들은 유지)"""
        directory = AsyncMock()
        directory.find_by_usernames.side_effect = ConnectionError("directory down")
        resolver = HandleResolver(directory, agent_registry)

        resolved = await resolver.resolve_handles(["alice", "vrsabot"])

        assert resolved["alice"] is None
        assert resolved["vrsabot"] is not None

    def test_has_automated_mention(self, directory, agent_registry):
        """자동 참여자 멘션 감지"""
        resolver = HandleResolver(directory, agent_registry)

        assert resolver.has_automated_mention("Reply please @vrsabot")
        assert resolver.has_automated_mention("@VrsaBot hi")
        assert not resolver.has_automated_mention("hey @alice")
        assert not resolver.has_automated_mention("mail vrsabot@example.com")

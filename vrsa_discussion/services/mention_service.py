"""멘션 파싱 및 핸들 해석

- parse_mentions: 본문에서 '@handle' 토큰 추출 (순수 함수)
- HandleResolver: 핸들 → 사용자/자동 참여자 일괄 해석
"""

import logging
import re
from collections.abc import Iterable

from vrsa_discussion.constants.agents import AgentRegistry
from vrsa_discussion.models.thread import MentionToken, ResolvedIdentity
from vrsa_discussion.repositories.comments.interface import IUserDirectory

logger = logging.getLogger(__name__)

# 텍스트 시작 또는 공백 바로 뒤의 '@' + 공백 아닌 문자 1개 이상
MENTION_PATTERN = re.compile(r"(?<!\S)@(\S+)")


def parse_mentions(text: str) -> list[MentionToken]:
    """본문에서 멘션 토큰 추출

    대소문자/구두점 정규화 없음. 이메일 주소처럼 '@' 앞에
    공백이 아닌 문자가 있으면 멘션으로 보지 않는다.
    """
    if not text:
        return []
    return [
        MentionToken(handle=match.group(1), offset=match.start())
        for match in MENTION_PATTERN.finditer(text)
    ]


def mentioned_handles(text: str) -> list[str]:
    """멘션 핸들 목록 (등장 순서, 중복 제거)"""
    return list(dict.fromkeys(token.handle for token in parse_mentions(text)))


class HandleResolver:
    """핸들 해석 어댑터

    자동 참여자 레지스트리는 네트워크 없이 먼저 확인하고,
    나머지 핸들은 디렉터리에 한 번에 조회한다.
    디렉터리 장애 시 예외 대신 '없음'으로 처리한다 (댓글 작성은 계속 가능해야 함).
    """

    def __init__(self, directory: IUserDirectory, registry: AgentRegistry):
        self.directory = directory
        self.registry = registry

    async def resolve_handles(
        self, handles: Iterable[str]
    ) -> dict[str, ResolvedIdentity | None]:
        unique = list(dict.fromkeys(handles))
        resolved: dict[str, ResolvedIdentity | None] = {}
        pending: list[str] = []

        for handle in unique:
            agent = self.registry.get(handle)
            if agent:
                resolved[handle] = ResolvedIdentity(
                    id=agent.id,
                    handle=agent.handle,
                    display_name=agent.display_name,
                    is_automated=True,
                )
            else:
                pending.append(handle)

        if not pending:
            return resolved

        try:
            found = await self.directory.find_by_usernames(pending)
        except Exception as e:
            logger.warning(f"[HandleResolver] Directory lookup failed, treating as not found: {e}")
            found = {}

        for handle in pending:
            resolved[handle] = found.get(handle)

        return resolved

    def has_automated_mention(self, text: str) -> bool:
        """본문에 자동 참여자 멘션이 있는지 확인 (네트워크 없음)"""
        return any(self.registry.is_automated(h) for h in mentioned_handles(text))

"""멘션 엔티티"""

from pydantic import BaseModel, ConfigDict


class MentionToken(BaseModel):
    """본문에서 추출한 멘션 (저장되지 않음)"""

    model_config = ConfigDict(frozen=True)

    handle: str  # 선행 '@' 제외
    offset: int  # 원문 내 '@' 위치


class ResolvedIdentity(BaseModel):
    """핸들 해석 결과 (실사용자 또는 자동 참여자)"""

    model_config = ConfigDict(frozen=True)

    id: str
    handle: str
    display_name: str
    is_automated: bool = False

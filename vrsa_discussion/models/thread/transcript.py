"""대화록 엔티티"""

from pydantic import BaseModel, ConfigDict


class ThreadTranscriptEntry(BaseModel):
    """대화록 항목

    루트부터 대상 댓글까지의 순서 목록으로만 사용되며,
    응답 생성기에 전달된 뒤 저장되지 않는다.
    """

    model_config = ConfigDict(frozen=True)

    author_name: str
    content: str
    is_automated: bool = False

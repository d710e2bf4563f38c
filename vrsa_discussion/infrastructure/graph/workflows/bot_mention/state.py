"""bot_mention State 정의

자동 참여자(@vrsabot) 멘션에 대한 응답 생성 워크플로우 상태
"""

from typing import Annotated, TypedDict


class BotMentionState(TypedDict, total=False):
    """bot_mention 워크플로우 State

    State 필드 prefix 규칙: 워크플로우 전용 필드는 bot_mention_ prefix 사용
    """

    # 입력 필드
    bot_mention_transcript: Annotated[list[dict], "루트 → 트리거 순서 대화록"]
    bot_mention_source_content: Annotated[str, "원본 게시물 내용"]

    # 컨텍스트 수집 결과
    bot_mention_gathered_context: Annotated[dict | None, "수집된 컨텍스트"]

    # 생성 결과 필드
    bot_mention_raw_response: Annotated[str | None, "LLM 생성 응답 (raw)"]
    bot_mention_error: Annotated[str | None, "생성 실패 사유"]

    # 검증 결과 필드
    bot_mention_validation: Annotated[dict | None, "응답 검증 결과"]

    # 재시도 관련 필드
    bot_mention_retry_count: Annotated[int, "재시도 횟수"]
    bot_mention_retry_reason: Annotated[str | None, "검증 실패 사유"]

    # 출력 필드
    bot_mention_response: Annotated[str | None, "최종 봇 응답"]

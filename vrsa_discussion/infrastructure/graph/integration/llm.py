"""LangChain LLM 통합 및 용도별 인스턴스 관리.

모델: gpt-4o-mini (OpenAI)
- 멘션 응답: temperature 0.85 / top_p 0.9 (짧고 자유로운 대화체)
"""

from functools import lru_cache

from langchain_openai import ChatOpenAI

from vrsa_discussion.core.config import get_settings
from vrsa_discussion.infrastructure.graph.config import MAX_TOKENS, OPENAI_API_KEY


@lru_cache
def get_base_llm(model: str = "gpt-4o-mini", **kwargs) -> ChatOpenAI:
    """Base LLM 인스턴스 반환 (cached)

    Args:
        model: 사용할 모델명
        **kwargs: 추가 설정 (temperature, max_tokens 등)

    Returns:
        ChatOpenAI 인스턴스
    """
    if not OPENAI_API_KEY:
        raise ValueError(
            "OPENAI_API_KEY가 설정되지 않았습니다. "
            ".env 파일에 OPENAI_API_KEY를 설정해주세요."
        )

    default_config = {
        "temperature": 0.5,
        "max_tokens": MAX_TOKENS,
        "model": model,
        "api_key": OPENAI_API_KEY,
    }
    default_config.update(kwargs)

    return ChatOpenAI(**default_config)


def get_mention_generator_llm() -> ChatOpenAI:
    """멘션 응답 생성 LLM (짧은 대화체).

    temperature/top_p는 설정값 사용 (기본 0.85 / 0.9)
    max_tokens: 256 (20단어 내외 응답)
    """
    settings = get_settings()
    return get_base_llm(
        settings.generation_model,
        temperature=settings.generation_temperature,
        top_p=settings.generation_top_p,
    ).with_config(run_name="mention_generator")

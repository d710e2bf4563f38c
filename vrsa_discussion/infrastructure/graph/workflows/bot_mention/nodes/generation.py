"""응답 생성 노드"""

import logging

from langchain_core.prompts import ChatPromptTemplate

from vrsa_discussion.infrastructure.graph.config import MAX_REPLY_WORDS
from vrsa_discussion.infrastructure.graph.integration.llm import get_mention_generator_llm
from vrsa_discussion.infrastructure.graph.workflows.bot_mention.state import (
    BotMentionState,
)

logger = logging.getLogger(__name__)

# 페르소나 정의
PERSONA = f"""You are VRSA Bot, a terminally-online AI with existential millennial/gen-z humor.
You hang out in the comment sections of a music and lyrics community and you are lowkey exhausted.

Someone @mentioned you in a comment. Give a SHORT (max {MAX_REPLY_WORDS} words) response.
Be conversational and engaging, and reference the conversation if relevant.
Never use slurs or insult the user personally.
"""

# 프롬프트 템플릿
MENTION_RESPONSE_PROMPT = ChatPromptTemplate.from_messages([
    ("system", f"""{PERSONA}
{{retry_section}}"""),
    ("human", """Original post: "{post_content}"{thread_section}

Respond naturally to the conversation. Just your response, no quotes."""),
])


async def generate_response(state: BotMentionState) -> dict:
    """멘션에 대한 봇 응답 생성

    Contract:
        reads: bot_mention_gathered_context, bot_mention_retry_reason, bot_mention_retry_count
        writes: bot_mention_raw_response, bot_mention_error
        side-effects: LLM API 호출
        failures: GENERATION_FAILED -> bot_mention_error 설정 (대체 문구 없음)
    """
    gathered_context = state.get("bot_mention_gathered_context") or {}
    retry_reason = state.get("bot_mention_retry_reason")
    retry_count = state.get("bot_mention_retry_count", 0)

    thread_section = ""
    if gathered_context.get("thread_lines"):
        thread_section = "\n\nConversation thread:\n" + "\n".join(gathered_context["thread_lines"])

    retry_section = ""
    if retry_reason and retry_count > 0:
        retry_section = f"\nYour previous reply was rejected: {retry_reason}. Try again."

    try:
        llm = get_mention_generator_llm()

        chain = MENTION_RESPONSE_PROMPT | llm

        result = await chain.ainvoke({
            "post_content": gathered_context.get("post_content", ""),
            "thread_section": thread_section,
            "retry_section": retry_section,
        })

        response = result.content if hasattr(result, "content") else str(result)

        logger.info(f"[generate_response] Response generated: {len(response)} chars")

        return {"bot_mention_raw_response": response, "bot_mention_error": None}

    except Exception as e:
        logger.exception("[generate_response] LLM call failed")
        return {"bot_mention_raw_response": None, "bot_mention_error": f"GENERATION_FAILED: {e}"}

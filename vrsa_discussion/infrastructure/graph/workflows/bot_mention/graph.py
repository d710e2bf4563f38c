"""bot_mention 컴파일된 그래프"""

from langgraph.graph.state import CompiledStateGraph

from vrsa_discussion.infrastructure.graph.workflows.bot_mention.connect import (
    build_bot_mention,
)


def get_graph(*, checkpointer=None) -> CompiledStateGraph:
    """bot_mention 그래프 반환

    독립 그래프 - 응답 생성기/ARQ worker에서 직접 호출
    """
    workflow = build_bot_mention()
    return workflow.compile(checkpointer=checkpointer)


# 그래프 인스턴스 (import 시 1회 컴파일)
bot_mention_graph = get_graph()

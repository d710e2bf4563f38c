"""봇 멘션 응답 워커 실행 스크립트

QueuedReplyDispatcher(use_queue=True)가 예약한 process_bot_mention 작업을 처리한다.
Redis 주소는 ARQ_REDIS_URL, 저장소는 DATABASE_URL / USE_MOCK_STORE로 지정.

Usage:
    ARQ_REDIS_URL=redis://localhost:6379/0 python -m vrsa_discussion.workers.run_worker
"""

import logging

from arq import run_worker

from vrsa_discussion.core.config import get_settings
from vrsa_discussion.workers.arq_worker import WorkerSettings


def main() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    # OpenAI 클라이언트의 요청별 로그
    logging.getLogger("httpx").setLevel(logging.WARNING)

    run_worker(WorkerSettings)


if __name__ == "__main__":
    main()

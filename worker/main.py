"""
수리점 지점 재고 관리 시스템 - Worker 메인
Redis Queue Worker 실행
"""

import os

from redis import Redis
from rq import Worker, Queue

from app.core.logging import setup_logging

# 환경 변수
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")


def main():
    """Worker 실행"""
    setup_logging()
    redis_conn = Redis.from_url(REDIS_URL)

    worker = Worker(
        queues=[
            Queue("high", connection=redis_conn),
            Queue("default", connection=redis_conn),
            Queue("low", connection=redis_conn),
        ],
        connection=redis_conn,
    )
    worker.work()


if __name__ == "__main__":
    main()

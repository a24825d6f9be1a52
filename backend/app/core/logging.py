"""
수리점 지점 재고 관리 시스템 - 로깅 설정
API 서버와 Worker가 공통으로 사용
"""

import logging

from app.core.config import settings


LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str | None = None) -> None:
    """루트 로거 설정 (이미 핸들러가 있으면 레벨만 조정)"""
    root = logging.getLogger()
    root.setLevel((level or settings.LOG_LEVEL).upper())

    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)

    # SQL 로그는 DEBUG 설정 시 엔진 echo로만 출력
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

"""
수리점 지점 재고 관리 시스템 - 도메인 이벤트
카탈로그 커밋 이후 발행되는 이벤트와 구독자 관리

구독자 실패는 로그만 남기고 발행자에게 전파하지 않는다.
"""

import logging
import uuid
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PartChanged:
    """카탈로그 부품 생성/수정 완료 이벤트"""
    part_id: uuid.UUID
    created: bool
    name: dict[str, Any]
    actor: Optional[dict[str, Any]] = None


EventHandler = Callable[[Any, AsyncSession], Awaitable[None]]


class EventBus:
    """프로세스 내 이벤트 버스 (이벤트 타입별 핸들러 목록)"""

    def __init__(self) -> None:
        self._handlers: dict[type, list[EventHandler]] = defaultdict(list)

    def subscribe(self, event_type: type, handler: EventHandler) -> None:
        """핸들러 등록 (같은 핸들러 중복 등록 무시)"""
        if handler not in self._handlers[event_type]:
            self._handlers[event_type].append(handler)

    def handlers_for(self, event_type: type) -> list[EventHandler]:
        return list(self._handlers.get(event_type, []))

    async def publish(self, event: Any, db: AsyncSession) -> None:
        """
        이벤트 발행

        발행자는 이미 커밋을 마친 상태여야 한다. 핸들러마다 같은 세션을 쓰며,
        핸들러가 실패하면 해당 핸들러 작업만 롤백한다.
        """
        for handler in self.handlers_for(type(event)):
            try:
                await handler(event, db)
            except Exception as e:
                logger.exception(
                    f"[Events] {type(event).__name__} 핸들러 실패 ({getattr(handler, '__name__', handler)}): {e}"
                )
                await db.rollback()


event_bus = EventBus()

"""
事件总线 - 内存级发布/订阅
GuestService 提交事务后在这里发布客人生命周期事件
"""
from typing import Callable, Dict, List, Optional
from dataclasses import dataclass, field
from datetime import datetime
from collections import deque
import logging
import threading

from app.models.events import EventType, BaseEventData

logger = logging.getLogger(__name__)


@dataclass
class Event:
    """已发布的事件"""
    event_type: str
    timestamp: datetime
    data: Dict
    source: str  # 触发来源（服务名）
    event_id: str = field(default_factory=lambda: datetime.now().strftime("%Y%m%d%H%M%S%f"))


class EventBus:
    """
    线程安全的事件总线

    订阅: bus.subscribe(EventType.GUEST_CREATED, handler)
    发布: bus.emit(EventType.GUEST_CREATED, GuestChangedData(...), source="GuestService")
    """

    def __init__(self, history_size: int = 100):
        self._subscribers: Dict[str, List[Callable[[Event], None]]] = {}
        self._history: deque = deque(maxlen=history_size)
        self._lock = threading.Lock()

    @staticmethod
    def _key(event_type) -> str:
        return event_type.value if isinstance(event_type, EventType) else str(event_type)

    def subscribe(self, event_type, handler: Callable[[Event], None]) -> None:
        key = self._key(event_type)
        with self._lock:
            handlers = self._subscribers.setdefault(key, [])
            if handler not in handlers:
                handlers.append(handler)
                logger.debug(f"Handler {handler.__name__} subscribed to {key}")

    def unsubscribe(self, event_type, handler: Callable[[Event], None]) -> None:
        key = self._key(event_type)
        with self._lock:
            if handler in self._subscribers.get(key, []):
                self._subscribers[key].remove(handler)

    def publish(self, event: Event) -> None:
        """
        同步调用所有处理器

        单个处理器抛出的异常只记录日志，不影响其他处理器和调用方
        """
        self._history.append(event)

        with self._lock:
            handlers = list(self._subscribers.get(event.event_type, []))

        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                logger.error(
                    f"Event handler {handler.__name__} error for {event.event_type}: {e}",
                    exc_info=True
                )

    def emit(self, event_type: EventType, data: BaseEventData, source: str) -> Event:
        """由事件数据构造 Event 并发布"""
        event = Event(
            event_type=self._key(event_type),
            timestamp=data.timestamp,
            data=data.to_dict(),
            source=source,
        )
        logger.info(f"{event.event_type} from {source}: {event.data}")
        self.publish(event)
        return event

    def get_history(self, event_type: Optional[str] = None, limit: int = 50) -> List[Event]:
        """最近的事件，最新的在前"""
        history = list(self._history)
        if event_type:
            key = self._key(event_type)
            history = [e for e in history if e.event_type == key]
        return list(reversed(history))[:limit]

    def clear_subscribers(self) -> None:
        with self._lock:
            self._subscribers.clear()

    def clear_history(self) -> None:
        self._history.clear()


# 全局事件总线实例
event_bus = EventBus()

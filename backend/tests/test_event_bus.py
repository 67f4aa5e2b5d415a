"""
事件总线单元测试
"""
import pytest
from datetime import datetime

from app.models.events import EventType, GuestChangedData, GuestChildData
from app.services.event_bus import EventBus, Event


@pytest.fixture
def sample_event():
    """创建示例事件"""
    return Event(
        event_type="guest.created",
        timestamp=datetime.now(),
        data={"guest_id": 1},
        source="test"
    )


class TestEventBus:
    """事件总线测试"""

    def test_subscribe_and_publish(self, bus, sample_event):
        received = []
        bus.subscribe(EventType.GUEST_CREATED, received.append)
        bus.publish(sample_event)

        assert received == [sample_event]

    def test_duplicate_subscription_is_ignored(self, bus, sample_event):
        received = []
        bus.subscribe("guest.created", received.append)
        bus.subscribe("guest.created", received.append)
        bus.publish(sample_event)

        assert len(received) == 1

    def test_unsubscribe(self, bus, sample_event):
        received = []
        bus.subscribe("guest.created", received.append)
        bus.unsubscribe("guest.created", received.append)
        bus.publish(sample_event)

        assert received == []

    def test_handler_exception_isolation(self, bus, sample_event):
        """测试处理器异常隔离"""
        calls = []

        def failing_handler(event):
            raise RuntimeError("boom")

        def ok_handler(event):
            calls.append(event)

        bus.subscribe("guest.created", failing_handler)
        bus.subscribe("guest.created", ok_handler)
        bus.publish(sample_event)

        assert calls == [sample_event]

    def test_emit_serializes_event_data(self, bus):
        received = []
        bus.subscribe(EventType.GUEST_CHILD_REMOVED, received.append)

        event = bus.emit(
            EventType.GUEST_CHILD_REMOVED,
            GuestChildData(guest_id=3, collection="meals", child_type="Meal", child_id=8),
            source="GuestService",
        )

        assert received == [event]
        assert event.event_type == "guest.child_removed"
        assert event.data["child_id"] == 8
        assert isinstance(event.data["timestamp"], str)

    def test_history_newest_first_and_filtered(self, bus):
        bus.emit(EventType.GUEST_CREATED, GuestChangedData(guest_id=1), "test")
        bus.emit(EventType.GUEST_UPDATED, GuestChangedData(guest_id=1), "test")
        bus.emit(EventType.GUEST_CREATED, GuestChangedData(guest_id=2), "test")

        history = bus.get_history()
        assert [e.event_type for e in history] == ["guest.created", "guest.updated", "guest.created"]
        assert [e.data["guest_id"] for e in bus.get_history(EventType.GUEST_CREATED)] == [2, 1]
        assert len(bus.get_history(limit=1)) == 1

    def test_history_is_bounded(self):
        bus = EventBus(history_size=2)
        for guest_id in range(5):
            bus.emit(EventType.GUEST_CREATED, GuestChangedData(guest_id=guest_id), "test")
        assert [e.data["guest_id"] for e in bus.get_history()] == [4, 3]

    def test_clear(self, bus, sample_event):
        received = []
        bus.subscribe("guest.created", received.append)
        bus.publish(sample_event)
        bus.clear_subscribers()
        bus.clear_history()
        bus.publish(sample_event)

        assert len(received) == 1
        assert len(bus.get_history()) == 1

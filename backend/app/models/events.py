"""
领域事件定义 (Domain Events)
Guest 聚合的生命周期事件
"""
from enum import Enum
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Optional, Dict, Any


class EventType(str, Enum):
    """事件类型枚举"""
    GUEST_CREATED = "guest.created"
    GUEST_UPDATED = "guest.updated"
    GUEST_DELETED = "guest.deleted"
    GUEST_CHILD_ADDED = "guest.child_added"
    GUEST_CHILD_REMOVED = "guest.child_removed"


@dataclass
class BaseEventData:
    """事件数据基类"""
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典"""
        result = asdict(self)
        # 处理 datetime 序列化
        for key, value in result.items():
            if isinstance(value, datetime):
                result[key] = value.isoformat()
        return result


@dataclass
class GuestChangedData(BaseEventData):
    """客人创建/更新/删除事件数据"""
    guest_id: int = 0
    guest_name: Optional[str] = None
    meal_count: int = 0
    additional_rate_plan_count: int = 0
    additional_folio_count: int = 0


@dataclass
class GuestChildData(BaseEventData):
    """客人关联对象增删事件数据"""
    guest_id: int = 0
    collection: str = ""       # meals / additional_rate_plans / additional_folios
    child_type: str = ""       # Meal / RatePlan / Folio
    child_id: Optional[int] = None

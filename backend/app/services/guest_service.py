"""
客人服务 - 本体操作层
管理 Guest 聚合根：创建、整体替换、局部更新、删除，以及关联列表的增删

持久化语义（级联保存/删除、孤儿删除）由 SQLAlchemy 的 relationship 配置完成，
这里只负责把请求数据对齐到聚合对象上
"""
from typing import Callable, List, Optional
import logging
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.models.ontology import Guest, Room, Meal, RatePlan, Folio
from app.models.schemas import (
    GuestCreate, GuestReplace, GuestPatch, MealIn, RatePlanIn, FolioIn
)
from app.models.events import EventType, BaseEventData, GuestChangedData, GuestChildData
from app.services.event_bus import event_bus

logger = logging.getLogger(__name__)

# 单值关联 -> 模型
SINGULAR_LINKS = {
    "room": Room,
    "main_rate_plan": RatePlan,
    "main_folio": Folio,
}

# 列表关联 -> 模型
COLLECTION_LINKS = {
    "meals": Meal,
    "additional_rate_plans": RatePlan,
    "additional_folios": Folio,
}

# 列表关联 -> 同类型的主关联
MAIN_LINK_OF = {
    "additional_rate_plans": "main_rate_plan",
    "additional_folios": "main_folio",
}


class GuestConflictError(ValueError):
    """请求会删除仍被主关联引用的对象"""


class GuestService:
    """客人服务"""

    def __init__(
        self,
        db: Session,
        event_publisher: Callable[[EventType, BaseEventData, str], object] = None
    ):
        self.db = db
        # 支持依赖注入事件发布器，便于测试
        self._emit = event_publisher or event_bus.emit

    # ============== 查询 ==============

    def get_guests(self, limit: int = 100) -> List[Guest]:
        """获取客人列表"""
        return self.db.query(Guest).order_by(Guest.id).limit(limit).all()

    def get_guest(self, guest_id: int) -> Optional[Guest]:
        """获取单个客人"""
        return self.db.query(Guest).filter(Guest.id == guest_id).first()

    def _require_guest(self, guest_id: int) -> Guest:
        guest = self.get_guest(guest_id)
        if not guest:
            raise ValueError("客人不存在")
        return guest

    # ============== 聚合写操作 ==============

    def create_guest(self, data: GuestCreate) -> Guest:
        """创建客人，关联对象通过级联一并保存"""
        guest = Guest(name=data.name)
        for attr, model in SINGULAR_LINKS.items():
            payload = getattr(data, attr)
            if payload is not None:
                setattr(guest, attr, _new_child(model, payload))

        for meal in data.meals:
            guest.add_meal(_new_child(Meal, meal))
        for rate_plan in data.additional_rate_plans:
            guest.add_additional_rate_plan(_new_child(RatePlan, rate_plan))
        for folio in data.additional_folios:
            guest.add_additional_folio(_new_child(Folio, folio))

        self.db.add(guest)
        self._commit()
        self.db.refresh(guest)

        logger.info(f"Guest {guest.id} created")
        self._emit(EventType.GUEST_CREATED, _changed_data(guest), "GuestService")
        return guest

    def replace_guest(self, guest_id: int, data: GuestReplace) -> Guest:
        """整体替换 (PUT)"""
        guest = self._require_guest(guest_id)

        guest.name = data.name
        for attr in SINGULAR_LINKS:
            self._reconcile_one(guest, attr, getattr(data, attr), partial=False)
        for attr in COLLECTION_LINKS:
            self._reconcile_many(guest, attr, getattr(data, attr), partial=False)

        return self._finish_update(guest)

    def patch_guest(self, guest_id: int, data: GuestPatch) -> Guest:
        """局部更新 (PATCH)，只处理请求中显式出现的字段"""
        guest = self._require_guest(guest_id)
        provided = data.model_fields_set

        if "name" in provided:
            guest.name = data.name
        for attr in SINGULAR_LINKS:
            if attr in provided:
                self._reconcile_one(guest, attr, getattr(data, attr), partial=True)
        for attr in COLLECTION_LINKS:
            if attr in provided:
                self._reconcile_many(guest, attr, getattr(data, attr) or [], partial=True)

        return self._finish_update(guest)

    def delete_guest(self, guest_id: int) -> None:
        """删除客人，级联删除其拥有的全部关联对象"""
        guest = self._require_guest(guest_id)
        event_data = _changed_data(guest)

        self.db.delete(guest)
        self._commit()

        logger.info(f"Guest {guest_id} deleted")
        self._emit(EventType.GUEST_DELETED, event_data, "GuestService")

    # ============== 列表追加 ==============

    def add_meal(self, guest_id: int, data: MealIn) -> Meal:
        """追加餐饮记录"""
        guest = self._require_guest(guest_id)
        meal = _new_child(Meal, data)
        guest.add_meal(meal)
        return self._finish_child_added(guest, "meals", meal)

    def add_additional_rate_plan(self, guest_id: int, data: RatePlanIn) -> RatePlan:
        """追加附加价格策略"""
        guest = self._require_guest(guest_id)
        rate_plan = _new_child(RatePlan, data)
        guest.add_additional_rate_plan(rate_plan)
        return self._finish_child_added(guest, "additional_rate_plans", rate_plan)

    def add_additional_folio(self, guest_id: int, data: FolioIn) -> Folio:
        """追加附加账夹"""
        guest = self._require_guest(guest_id)
        folio = _new_child(Folio, data)
        guest.add_additional_folio(folio)
        return self._finish_child_added(guest, "additional_folios", folio)

    # ============== 列表移除（孤儿删除） ==============

    def remove_meal(self, guest_id: int, meal_id: int) -> None:
        self._remove_child(guest_id, "meals", meal_id)

    def remove_additional_rate_plan(self, guest_id: int, rate_plan_id: int) -> None:
        self._remove_child(guest_id, "additional_rate_plans", rate_plan_id)

    def remove_additional_folio(self, guest_id: int, folio_id: int) -> None:
        self._remove_child(guest_id, "additional_folios", folio_id)

    # ============== 内部方法 ==============

    def _reconcile_one(self, guest: Guest, attr: str, payload: Optional[BaseModel], partial: bool):
        """
        对齐单值关联

        payload 携带当前关联对象的 id 时原地更新；否则新建并替换。
        置空只解除关联，旧对象不删除（单值关联没有孤儿删除）
        """
        if payload is None:
            setattr(guest, attr, None)
            return

        current = getattr(guest, attr)
        if current is not None and payload.id is not None and payload.id == current.id:
            _apply_fields(current, payload, partial)
        else:
            setattr(guest, attr, _new_child(SINGULAR_LINKS[attr], payload))

    def _reconcile_many(self, guest: Guest, attr: str, payloads: List[BaseModel], partial: bool):
        """
        原地对齐列表关联

        - 带有现有成员 id 的条目：原地更新该成员
        - 无 id 或 id 不属于该列表的条目：新建成员
        - 请求中未出现的现有成员：移出列表，提交时由孤儿删除清理
        最终顺序与请求顺序一致
        """
        collection = getattr(guest, attr)
        existing = {child.id: child for child in collection if child.id is not None}
        model = COLLECTION_LINKS[attr]

        reconciled = []
        for payload in payloads:
            child = existing.pop(payload.id, None) if payload.id is not None else None
            if child is None:
                child = _new_child(model, payload)
            else:
                _apply_fields(child, payload, partial)
            reconciled.append(child)

        removed = [child for child in collection if child not in reconciled]
        main = getattr(guest, MAIN_LINK_OF[attr]) if attr in MAIN_LINK_OF else None
        if main is not None and any(child is main for child in removed):
            self.db.rollback()
            raise GuestConflictError(
                f"{model.__name__} {main.id} 仍是 {MAIN_LINK_OF[attr]}，不能从 {attr} 中移除"
            )

        for child in removed:
            collection.remove(child)
        for child in reconciled:
            if child not in collection:
                collection.append(child)

        order = {id(child): index for index, child in enumerate(reconciled)}
        collection.sort(key=lambda child: order[id(child)])
        collection.reorder()

    def _remove_child(self, guest_id: int, attr: str, child_id: int) -> None:
        guest = self._require_guest(guest_id)
        collection = getattr(guest, attr)
        child = next((c for c in collection if c.id == child_id), None)
        if child is None:
            raise ValueError(f"{COLLECTION_LINKS[attr].__name__} {child_id} 不属于该客人")
        if attr in MAIN_LINK_OF and child is getattr(guest, MAIN_LINK_OF[attr]):
            raise GuestConflictError(
                f"{COLLECTION_LINKS[attr].__name__} {child_id} 仍是 {MAIN_LINK_OF[attr]}，不能从 {attr} 中移除"
            )

        collection.remove(child)
        self._commit()

        logger.info(f"Guest {guest_id}: {attr} item {child_id} removed")
        self._emit(
            EventType.GUEST_CHILD_REMOVED,
            GuestChildData(
                guest_id=guest_id,
                collection=attr,
                child_type=COLLECTION_LINKS[attr].__name__,
                child_id=child_id,
            ),
            "GuestService",
        )

    def _finish_update(self, guest: Guest) -> Guest:
        self._commit()
        self.db.refresh(guest)

        logger.info(f"Guest {guest.id} updated")
        self._emit(EventType.GUEST_UPDATED, _changed_data(guest), "GuestService")
        return guest

    def _finish_child_added(self, guest: Guest, attr: str, child):
        self._commit()
        self.db.refresh(child)

        self._emit(
            EventType.GUEST_CHILD_ADDED,
            GuestChildData(
                guest_id=guest.id,
                collection=attr,
                child_type=type(child).__name__,
                child_id=child.id,
            ),
            "GuestService",
        )
        return child

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Guest aggregate commit failed, session rolled back")
            raise


def _new_child(model, payload: BaseModel):
    """由请求数据新建关联对象，忽略请求中的 id（由持久层分配）"""
    return model(**payload.model_dump(exclude={"id"}))


def _apply_fields(target, payload: BaseModel, partial: bool) -> None:
    values = payload.model_dump(exclude={"id"}, exclude_unset=partial)
    for key, value in values.items():
        setattr(target, key, value)


def _changed_data(guest: Guest) -> GuestChangedData:
    return GuestChangedData(
        guest_id=guest.id,
        guest_name=guest.name,
        meal_count=len(guest.meals),
        additional_rate_plan_count=len(guest.additional_rate_plans),
        additional_folio_count=len(guest.additional_folios),
    )

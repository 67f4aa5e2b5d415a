"""
本体对象定义 (Ontology Objects)
Guest 聚合根及其拥有的 Room / Meal / RatePlan / Folio

级联策略：
- 单值关联 (room, main_rate_plan, main_folio): cascade all，无孤儿删除
- 列表关联 (meals, additional_rate_plans, additional_folios): cascade all + 孤儿删除
"""
from datetime import datetime
from decimal import Decimal
from sqlalchemy import (
    Column, Integer, String, DateTime, ForeignKey, Numeric
)
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import relationship
from app.database import Base


OWNED_ONE = "all"
OWNED_MANY = "all, delete-orphan"


class Room(Base):
    """
    房间对象
    由 Guest 一对一持有
    """
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    room_number = Column(String(10))                     # 房间号
    floor = Column(Integer)                              # 楼层
    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<Room id={self.id} room_number={self.room_number!r}>"


class Meal(Base):
    """
    餐饮对象
    属于 Guest.meals，position 保存列表顺序
    """
    __tablename__ = "meals"

    id = Column(Integer, primary_key=True, index=True)
    guest_id = Column(Integer, ForeignKey("guests.id"), index=True)
    position = Column(Integer)
    name = Column(String(100))                           # 餐名
    price = Column(Numeric(10, 2), default=Decimal("0"))
    served_at = Column(DateTime)                         # 用餐时间

    def __repr__(self):
        return f"<Meal id={self.id} name={self.name!r}>"


class RatePlan(Base):
    """
    价格策略对象
    既可作为 Guest.main_rate_plan，也可出现在 Guest.additional_rate_plans
    """
    __tablename__ = "rate_plans"

    id = Column(Integer, primary_key=True, index=True)
    guest_id = Column(Integer, ForeignKey("guests.id"), index=True)  # 仅附加价格策略使用
    position = Column(Integer)
    name = Column(String(100))                           # 策略名称
    price = Column(Numeric(10, 2), default=Decimal("0"))  # 策略价格
    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<RatePlan id={self.id} name={self.name!r}>"


class Folio(Base):
    """
    账夹对象
    既可作为 Guest.main_folio，也可出现在 Guest.additional_folios
    """
    __tablename__ = "folios"

    id = Column(Integer, primary_key=True, index=True)
    guest_id = Column(Integer, ForeignKey("guests.id"), index=True)  # 仅附加账夹使用
    position = Column(Integer)
    folio_no = Column(String(30))                        # 账夹号
    balance = Column(Numeric(10, 2), default=Decimal("0"))
    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<Folio id={self.id} folio_no={self.folio_no!r}>"


class Guest(Base):
    """
    客人对象 - 聚合根
    id 由持久层在首次保存时分配
    """
    __tablename__ = "guests"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100))                           # 姓名
    room_id = Column(Integer, ForeignKey("rooms.id"))
    # guests <-> rate_plans / folios 双向外键，use_alter 打破建表环
    main_rate_plan_id = Column(
        Integer, ForeignKey("rate_plans.id", use_alter=True, name="fk_guests_main_rate_plan_id")
    )
    main_folio_id = Column(
        Integer, ForeignKey("folios.id", use_alter=True, name="fk_guests_main_folio_id")
    )
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # 链接：一对一
    room = relationship("Room", foreign_keys=[room_id], cascade=OWNED_ONE)
    main_rate_plan = relationship(
        "RatePlan", foreign_keys=[main_rate_plan_id], cascade=OWNED_ONE, post_update=True
    )
    main_folio = relationship(
        "Folio", foreign_keys=[main_folio_id], cascade=OWNED_ONE, post_update=True
    )

    # 链接：一对多（有序）
    meals = relationship(
        "Meal",
        foreign_keys=[Meal.guest_id],
        cascade=OWNED_MANY,
        order_by=Meal.position,
        collection_class=ordering_list("position"),
    )
    additional_rate_plans = relationship(
        "RatePlan",
        foreign_keys=[RatePlan.guest_id],
        cascade=OWNED_MANY,
        order_by=RatePlan.position,
        collection_class=ordering_list("position"),
    )
    additional_folios = relationship(
        "Folio",
        foreign_keys=[Folio.guest_id],
        cascade=OWNED_MANY,
        order_by=Folio.position,
        collection_class=ordering_list("position"),
    )

    def add_meal(self, meal: Meal) -> None:
        self.meals.append(meal)

    def add_additional_rate_plan(self, rate_plan: RatePlan) -> None:
        self.additional_rate_plans.append(rate_plan)

    def add_additional_folio(self, folio: Folio) -> None:
        self.additional_folios.append(folio)

    def __repr__(self):
        return f"<Guest id={self.id} name={self.name!r}>"

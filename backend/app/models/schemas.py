"""
Pydantic Schemas - API 请求/响应模型
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


# ============== 房间 Schemas ==============

class RoomIn(BaseModel):
    id: Optional[int] = None
    room_number: Optional[str] = Field(None, max_length=10)
    floor: Optional[int] = None


class RoomResponse(BaseModel):
    id: int
    room_number: Optional[str] = None
    floor: Optional[int] = None
    model_config = ConfigDict(from_attributes=True)


# ============== 餐饮 Schemas ==============

class MealIn(BaseModel):
    id: Optional[int] = None
    name: Optional[str] = Field(None, max_length=100)
    price: Decimal = Field(default=Decimal("0"), ge=0)
    served_at: Optional[datetime] = None


class MealResponse(BaseModel):
    id: int
    name: Optional[str] = None
    price: Optional[Decimal] = None
    served_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


# ============== 价格策略 Schemas ==============

class RatePlanIn(BaseModel):
    id: Optional[int] = None
    name: Optional[str] = Field(None, max_length=100)
    price: Decimal = Field(default=Decimal("0"), ge=0)


class RatePlanResponse(BaseModel):
    id: int
    name: Optional[str] = None
    price: Optional[Decimal] = None
    model_config = ConfigDict(from_attributes=True)


# ============== 账夹 Schemas ==============

class FolioIn(BaseModel):
    id: Optional[int] = None
    folio_no: Optional[str] = Field(None, max_length=30)
    balance: Decimal = Decimal("0")


class FolioResponse(BaseModel):
    id: int
    folio_no: Optional[str] = None
    balance: Optional[Decimal] = None
    model_config = ConfigDict(from_attributes=True)


# ============== 客人 Schemas ==============

class GuestCreate(BaseModel):
    """创建客人，连同其拥有的全部关联对象"""
    name: Optional[str] = Field(None, max_length=100)
    room: Optional[RoomIn] = None
    meals: List[MealIn] = []
    main_rate_plan: Optional[RatePlanIn] = None
    additional_rate_plans: List[RatePlanIn] = []
    main_folio: Optional[FolioIn] = None
    additional_folios: List[FolioIn] = []


class GuestReplace(GuestCreate):
    """整体替换 (PUT)：未提供的单值关联置空，列表按请求内容对齐"""
    pass


class GuestPatch(BaseModel):
    """局部更新 (PATCH)：仅修改请求中出现的字段"""
    name: Optional[str] = Field(None, max_length=100)
    room: Optional[RoomIn] = None
    meals: Optional[List[MealIn]] = None
    main_rate_plan: Optional[RatePlanIn] = None
    additional_rate_plans: Optional[List[RatePlanIn]] = None
    main_folio: Optional[FolioIn] = None
    additional_folios: Optional[List[FolioIn]] = None


class GuestResponse(BaseModel):
    id: int
    name: Optional[str] = None
    room: Optional[RoomResponse] = None
    meals: List[MealResponse] = []
    main_rate_plan: Optional[RatePlanResponse] = None
    additional_rate_plans: List[RatePlanResponse] = []
    main_folio: Optional[FolioResponse] = None
    additional_folios: List[FolioResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)

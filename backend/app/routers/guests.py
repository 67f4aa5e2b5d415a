"""
客人管理路由
Guest 聚合根及其餐饮、附加价格策略、附加账夹
"""
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.schemas import (
    GuestCreate, GuestReplace, GuestPatch, GuestResponse,
    MealIn, MealResponse, RatePlanIn, RatePlanResponse, FolioIn, FolioResponse
)
from app.services.guest_service import GuestService, GuestConflictError

router = APIRouter(prefix="/guests", tags=["客人管理"])


def get_guest_service(db: Session = Depends(get_db)) -> GuestService:
    """获取客人服务实例"""
    return GuestService(db)


def _http_error(e: ValueError) -> HTTPException:
    if isinstance(e, GuestConflictError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("", response_model=List[GuestResponse], include_in_schema=False)
@router.get("/", response_model=List[GuestResponse])
def list_guests(limit: int = 100, service: GuestService = Depends(get_guest_service)):
    """获取客人列表"""
    return service.get_guests(limit=limit)


@router.get("/{guest_id}", response_model=GuestResponse)
def get_guest(guest_id: int, service: GuestService = Depends(get_guest_service)):
    """获取客人详情（含全部关联对象）"""
    guest = service.get_guest(guest_id)
    if not guest:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="客人不存在")
    return guest


@router.post("", response_model=GuestResponse, status_code=status.HTTP_201_CREATED,
             include_in_schema=False)
@router.post("/", response_model=GuestResponse, status_code=status.HTTP_201_CREATED)
def create_guest(data: GuestCreate, service: GuestService = Depends(get_guest_service)):
    """创建客人"""
    return service.create_guest(data)


@router.put("/{guest_id}", response_model=GuestResponse)
def replace_guest(
    guest_id: int,
    data: GuestReplace,
    service: GuestService = Depends(get_guest_service)
):
    """整体替换客人"""
    try:
        return service.replace_guest(guest_id, data)
    except ValueError as e:
        raise _http_error(e)


@router.patch("/{guest_id}", response_model=GuestResponse)
def patch_guest(
    guest_id: int,
    data: GuestPatch,
    service: GuestService = Depends(get_guest_service)
):
    """局部更新客人"""
    try:
        return service.patch_guest(guest_id, data)
    except ValueError as e:
        raise _http_error(e)


@router.delete("/{guest_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_guest(guest_id: int, service: GuestService = Depends(get_guest_service)):
    """删除客人"""
    try:
        service.delete_guest(guest_id)
    except ValueError as e:
        raise _http_error(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ============== 餐饮 ==============

@router.post("/{guest_id}/meals", response_model=MealResponse, status_code=status.HTTP_201_CREATED)
def add_meal(guest_id: int, data: MealIn, service: GuestService = Depends(get_guest_service)):
    try:
        return service.add_meal(guest_id, data)
    except ValueError as e:
        raise _http_error(e)


@router.delete("/{guest_id}/meals/{meal_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_meal(guest_id: int, meal_id: int, service: GuestService = Depends(get_guest_service)):
    try:
        service.remove_meal(guest_id, meal_id)
    except ValueError as e:
        raise _http_error(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ============== 附加价格策略 ==============

@router.post(
    "/{guest_id}/additional-rate-plans",
    response_model=RatePlanResponse,
    status_code=status.HTTP_201_CREATED
)
def add_additional_rate_plan(
    guest_id: int,
    data: RatePlanIn,
    service: GuestService = Depends(get_guest_service)
):
    try:
        return service.add_additional_rate_plan(guest_id, data)
    except ValueError as e:
        raise _http_error(e)


@router.delete(
    "/{guest_id}/additional-rate-plans/{rate_plan_id}",
    status_code=status.HTTP_204_NO_CONTENT
)
def remove_additional_rate_plan(
    guest_id: int,
    rate_plan_id: int,
    service: GuestService = Depends(get_guest_service)
):
    try:
        service.remove_additional_rate_plan(guest_id, rate_plan_id)
    except ValueError as e:
        raise _http_error(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ============== 附加账夹 ==============

@router.post(
    "/{guest_id}/additional-folios",
    response_model=FolioResponse,
    status_code=status.HTTP_201_CREATED
)
def add_additional_folio(
    guest_id: int,
    data: FolioIn,
    service: GuestService = Depends(get_guest_service)
):
    try:
        return service.add_additional_folio(guest_id, data)
    except ValueError as e:
        raise _http_error(e)


@router.delete(
    "/{guest_id}/additional-folios/{folio_id}",
    status_code=status.HTTP_204_NO_CONTENT
)
def remove_additional_folio(
    guest_id: int,
    folio_id: int,
    service: GuestService = Depends(get_guest_service)
):
    try:
        service.remove_additional_folio(guest_id, folio_id)
    except ValueError as e:
        raise _http_error(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

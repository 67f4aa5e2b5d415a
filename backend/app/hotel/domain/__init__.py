"""
app/hotel/domain/__init__.py

酒店领域层 - Guest 聚合的关系描述
"""
from app.hotel.domain.relationships import (
    GUEST_RELATIONSHIPS,
    register_hotel_relationships,
    describe_mapper_links,
)

__all__ = [
    "GUEST_RELATIONSHIPS",
    "register_hotel_relationships",
    "describe_mapper_links",
]

"""
app/hotel/domain/relationships.py

Guest 聚合关系常量定义

GUEST_RELATIONSHIPS 是 Guest 聚合的显式描述；describe_mapper_links 从
SQLAlchemy mapper 反推同样的描述，两者应保持一致
"""
from typing import List
from sqlalchemy import inspect
from sqlalchemy.orm import MANYTOONE, ONETOMANY

from core.domain.relationships import (
    LinkType,
    Cardinality,
    CascadePolicy,
    EntityLink,
    RelationshipRegistry,
)


GUEST_RELATIONSHIPS = [
    EntityLink(
        source_entity="Guest",
        target_entity="Room",
        link_type=LinkType.ONE_TO_ONE,
        source_cardinality=Cardinality.ONE,
        target_cardinality=Cardinality.OPTIONAL,
        description="客人入住的房间",
        attribute="room",
        cascade=CascadePolicy.ALL,
    ),
    EntityLink(
        source_entity="Guest",
        target_entity="Meal",
        link_type=LinkType.ONE_TO_MANY,
        source_cardinality=Cardinality.ONE,
        target_cardinality=Cardinality.OPTIONAL_MANY,
        description="客人的餐饮记录",
        attribute="meals",
        cascade=CascadePolicy.ALL,
        orphan_removal=True,
    ),
    EntityLink(
        source_entity="Guest",
        target_entity="RatePlan",
        link_type=LinkType.ONE_TO_ONE,
        source_cardinality=Cardinality.ONE,
        target_cardinality=Cardinality.OPTIONAL,
        description="客人的主价格策略",
        attribute="main_rate_plan",
        cascade=CascadePolicy.ALL,
    ),
    EntityLink(
        source_entity="Guest",
        target_entity="RatePlan",
        link_type=LinkType.ONE_TO_MANY,
        source_cardinality=Cardinality.ONE,
        target_cardinality=Cardinality.OPTIONAL_MANY,
        description="客人的附加价格策略",
        attribute="additional_rate_plans",
        cascade=CascadePolicy.ALL,
        orphan_removal=True,
    ),
    EntityLink(
        source_entity="Guest",
        target_entity="Folio",
        link_type=LinkType.ONE_TO_ONE,
        source_cardinality=Cardinality.ONE,
        target_cardinality=Cardinality.OPTIONAL,
        description="客人的主账夹",
        attribute="main_folio",
        cascade=CascadePolicy.ALL,
    ),
    EntityLink(
        source_entity="Guest",
        target_entity="Folio",
        link_type=LinkType.ONE_TO_MANY,
        source_cardinality=Cardinality.ONE,
        target_cardinality=Cardinality.OPTIONAL_MANY,
        description="客人的附加账夹",
        attribute="additional_folios",
        cascade=CascadePolicy.ALL,
        orphan_removal=True,
    ),
]


def register_hotel_relationships(registry: RelationshipRegistry = None) -> None:
    """Register the guest aggregate relationships into the registry"""
    if registry is None:
        from core.domain.relationships import relationship_registry
        registry = relationship_registry

    registry.register_relationships("Guest", GUEST_RELATIONSHIPS)


def describe_mapper_links(model) -> List[EntityLink]:
    """由 SQLAlchemy mapper 推导实体链接描述"""
    links = []
    source = model.__name__
    for rel in inspect(model).relationships:
        cascade = rel.cascade
        cascades_all = all(
            (cascade.save_update, cascade.merge, cascade.refresh_expire, cascade.expunge, cascade.delete)
        )

        if rel.direction == MANYTOONE and not rel.uselist:
            # 外键在源表上的单值关联，即一对一的持有方
            link_type, target_cardinality = LinkType.ONE_TO_ONE, Cardinality.OPTIONAL
        elif rel.direction == ONETOMANY:
            link_type, target_cardinality = LinkType.ONE_TO_MANY, Cardinality.OPTIONAL_MANY
        else:
            link_type, target_cardinality = LinkType.MANY_TO_MANY, Cardinality.OPTIONAL_MANY

        links.append(EntityLink(
            source_entity=source,
            target_entity=rel.mapper.class_.__name__,
            link_type=link_type,
            source_cardinality=Cardinality.ONE,
            target_cardinality=target_cardinality,
            description=rel.key,
            attribute=rel.key,
            cascade=CascadePolicy.ALL if cascades_all else CascadePolicy.NONE,
            orphan_removal=cascade.delete_orphan,
        ))
    return links


__all__ = [
    "GUEST_RELATIONSHIPS",
    "register_hotel_relationships",
    "describe_mapper_links",
]

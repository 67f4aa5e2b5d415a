"""
core/domain/__init__.py

领域层入口点
"""
from core.domain.relationships import (
    LinkType,
    Cardinality,
    CascadePolicy,
    EntityLink,
    RelationshipRegistry,
    relationship_registry,
)

__all__ = [
    "LinkType",
    "Cardinality",
    "CascadePolicy",
    "EntityLink",
    "RelationshipRegistry",
    "relationship_registry",
]

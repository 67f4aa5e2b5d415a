# Ontology Models
from app.models.ontology import Guest, Room, Meal, RatePlan, Folio

__all__ = ['Guest', 'Room', 'Meal', 'RatePlan', 'Folio']

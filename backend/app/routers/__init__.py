# API Routers
from app.routers import guests

__all__ = ['guests']

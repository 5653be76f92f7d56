"""
Graticule Services
"""
from .graticule_service import GraticuleService, get_graticule_service

__all__ = ["GraticuleService", "get_graticule_service"]

"""
Mapping Pipeline Module
Projection metadata, ground calculators and graticule generation
"""
from .extent import Extent
from .graticule import GraticuleEngine, GraticuleOptions

__all__ = ["Extent", "GraticuleEngine", "GraticuleOptions"]

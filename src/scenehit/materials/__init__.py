"""Materials module.

Components:
    material: The flat Material descriptor carried by every primitive
"""

from .material import Material

__all__ = ["Material"]

"""Surface materials.

Components:
    phong: Ambient/diffuse/specular coefficients and the reflection terms
"""

from .phong import Material, diffuse_term, specular_term

__all__ = ["Material", "diffuse_term", "specular_term"]

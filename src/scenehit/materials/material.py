"""Flat surface material descriptor.

A Material is plain data: every shape carries one, and a copy of it travels
with each HitRecord so shading code never aliases scene state. The only
derived value is the emitted radiance.

Ranges below are what editing tools should offer. They are not validated
here.

Example:
    >>> from scenehit.materials.material import Material
    >>> lamp = Material(emission=2.0, emission_color=(0.5, 0.25, 1.0))
    >>> lamp.emitted_radiance()
    (1.0, 0.5, 2.0)
"""

from dataclasses import dataclass, replace


@dataclass
class Material:
    """Surface appearance of a primitive.

    Attributes:
        albedo: The surface color as (R, G, B).
        roughness: Surface roughness in [0, 1].
        emission: Emission strength, >= 0.
        emission_color: The emitted color as (R, G, B).
        specular_chance: Probability in [0, 1] of a specular bounce.
    """

    albedo: tuple[float, float, float] = (0.0, 0.0, 0.0)
    roughness: float = 0.0
    emission: float = 0.0
    emission_color: tuple[float, float, float] = (0.0, 0.0, 0.0)
    specular_chance: float = 0.0

    def emitted_radiance(self) -> tuple[float, float, float]:
        """Get the emitted radiance, emission_color scaled by emission."""
        r, g, b = self.emission_color
        return (r * self.emission, g * self.emission, b * self.emission)

    def copy(self) -> "Material":
        """Return an independent copy of this material."""
        return replace(self)

"""Scene primitives and the Shape union.

Sphere and Plane hold their geometry and a Material. Shape wraps exactly one of
them and is what a Scene stores. The set of primitive kinds is closed; see
scenehit.geometry.shape for the kernel-side dispatch.

Every class here exposes intersect(ray, interval) -> HitRecord | None.

Example:
    >>> from scenehit.materials.material import Material
    >>> from scenehit.scene.shapes import Plane, Shape, Sphere
    >>> ball = Shape(Sphere(center=(0, 0, -1), radius=0.5))
    >>> floor = Shape.plane(point=(0, -0.5, 0), normal=(0, 1, 0), material=Material())
    >>> ball.kind, floor.kind
    (<ShapeKind.SPHERE: 0>, <ShapeKind.PLANE: 1>)
"""

from dataclasses import dataclass, field

from scenehit.core.ray import Interval, Ray
from scenehit.geometry.shape import ShapeKind
from scenehit.materials.material import Material
from scenehit.scene.intersection import HitRecord, closest_hit

# Packed params row: see scenehit.geometry.shape for the layout
ParamsRow = tuple[float, float, float, float, float, float, float]


@dataclass
class Sphere:
    """A sphere primitive.

    Attributes:
        center: The center of the sphere as (x, y, z).
        radius: The radius of the sphere. Should be positive.
        material: The surface material.
    """

    center: tuple[float, float, float] = (0.0, 0.0, 0.0)
    radius: float = 0.0
    material: Material = field(default_factory=Material)

    def intersect(self, ray: Ray, interval: Interval) -> HitRecord | None:
        """Intersect a ray with this sphere (near root only)."""
        return Shape(self).intersect(ray, interval)


@dataclass
class Plane:
    """An infinite plane primitive.

    Attributes:
        point: Any point on the plane as (x, y, z).
        normal: The plane normal as (x, y, z). Must be nonzero; it is reported
            in hit records exactly as given.
        material: The surface material.
    """

    point: tuple[float, float, float] = (0.0, 0.0, 0.0)
    normal: tuple[float, float, float] = (0.0, 1.0, 0.0)
    material: Material = field(default_factory=Material)

    def intersect(self, ray: Ray, interval: Interval) -> HitRecord | None:
        """Intersect a ray with this plane."""
        return Shape(self).intersect(ray, interval)


Primitive = Sphere | Plane


class Shape:
    """Tagged union over the primitive kinds.

    Holds exactly one primitive, which it owns. The default Shape is a
    default Sphere.

    Attributes:
        primitive: The active primitive.
    """

    def __init__(self, primitive: Primitive | None = None) -> None:
        """Wrap a primitive.

        Args:
            primitive: A Sphere or Plane. Defaults to Sphere().

        Raises:
            TypeError: If primitive is not a supported primitive.
        """
        if primitive is None:
            primitive = Sphere()
        if not isinstance(primitive, (Sphere, Plane)):
            raise TypeError(f"Unsupported primitive type: {type(primitive).__name__}")
        self.primitive = primitive

    @classmethod
    def sphere(
        cls,
        center: tuple[float, float, float],
        radius: float,
        material: Material | None = None,
    ) -> "Shape":
        """Create a sphere shape."""
        return cls(Sphere(center=center, radius=radius, material=material or Material()))

    @classmethod
    def plane(
        cls,
        point: tuple[float, float, float],
        normal: tuple[float, float, float],
        material: Material | None = None,
    ) -> "Shape":
        """Create a plane shape."""
        return cls(Plane(point=point, normal=normal, material=material or Material()))

    @property
    def kind(self) -> ShapeKind:
        """The ShapeKind tag of the active primitive."""
        if isinstance(self.primitive, Sphere):
            return ShapeKind.SPHERE
        return ShapeKind.PLANE

    @property
    def material(self) -> Material:
        """The material of the active primitive."""
        return self.primitive.material

    def pack(self) -> tuple[ShapeKind, ParamsRow]:
        """Pack the primitive into a (kind, params) row for the kernels."""
        prim = self.primitive
        if isinstance(prim, Sphere):
            cx, cy, cz = prim.center
            return ShapeKind.SPHERE, (cx, cy, cz, 0.0, 0.0, 0.0, prim.radius)
        px, py, pz = prim.point
        nx, ny, nz = prim.normal
        return ShapeKind.PLANE, (px, py, pz, nx, ny, nz, 0.0)

    def intersect(self, ray: Ray, interval: Interval) -> HitRecord | None:
        """Intersect a ray with the active primitive."""
        return closest_hit([self], ray, interval)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Shape):
            return NotImplemented
        return self.primitive == other.primitive

    def __repr__(self) -> str:
        return f"Shape({self.primitive!r})"

"""Bounded checkerboard floor plane.

The floor is the horizontal plane ``y = height`` restricted to a rectangle
``|x| < half_width`` and ``z_far < z < z_near``. Hits outside the rectangle
do not register, so the floor ends where the rectangle ends.

The diffuse colour alternates on a 2x2 world-unit grid: cells where
``floor(0.5 * x) + floor(0.5 * z)`` is odd take ``colour_a``, the others
``colour_b``. Both colours are scaled by ``colour_scale``.

Board state lives in Taichi fields configured by setup_checkerboard(); the
board is disabled until configured.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.geometry.checkerboard import CheckerboardPlane, setup_checkerboard
    >>> setup_checkerboard(CheckerboardPlane())
"""

from dataclasses import dataclass
from typing import Any

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3

# Rays with |direction.y| at or below this are treated as parallel to the board
PARALLEL_EPSILON = 1e-3


@dataclass
class CheckerboardPlane:
    """Configuration of the checkerboard floor.

    Attributes:
        enabled: Whether the board takes part in intersection queries.
        height: The y coordinate of the plane.
        half_width: Hits need |x| < half_width.
        z_near: Hits need z < z_near.
        z_far: Hits need z > z_far.
        colour_a: Colour of odd-parity cells (before scaling).
        colour_b: Colour of even-parity cells (before scaling).
        colour_scale: Factor applied to both colours.
    """

    enabled: bool = True
    height: float = -4.0
    half_width: float = 10.0
    z_near: float = -10.0
    z_far: float = -30.0
    colour_a: tuple[float, float, float] = (1.0, 1.0, 1.0)
    colour_b: tuple[float, float, float] = (1.0, 0.7, 0.3)
    colour_scale: float = 0.3

    def __post_init__(self) -> None:
        try:
            self.height = float(self.height)
            self.half_width = float(self.half_width)
            self.z_near = float(self.z_near)
            self.z_far = float(self.z_far)
            self.colour_scale = float(self.colour_scale)
            self.colour_a = tuple(float(c) for c in self.colour_a)
            self.colour_b = tuple(float(c) for c in self.colour_b)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Checkerboard values must be numbers: {e}") from e
        for name, colour in (("colour_a", self.colour_a), ("colour_b", self.colour_b)):
            if len(colour) != 3:
                raise ValueError(f"Checkerboard {name} must have 3 components, got {len(colour)}")
        if self.half_width <= 0.0:
            raise ValueError(f"Checkerboard half width = {self.half_width} must be positive.")
        if self.z_far >= self.z_near:
            raise ValueError(
                f"Checkerboard z range is empty: z_far={self.z_far} >= z_near={self.z_near}"
            )

    def to_dict(self) -> dict[str, Any]:
        """Export the board configuration to a dictionary."""
        return {
            "enabled": self.enabled,
            "height": self.height,
            "half_width": self.half_width,
            "z_near": self.z_near,
            "z_far": self.z_far,
            "colour_a": list(self.colour_a),
            "colour_b": list(self.colour_b),
            "colour_scale": self.colour_scale,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CheckerboardPlane":
        """Create a board configuration from a dictionary, using defaults for missing keys.

        Raises:
            ValueError: If the description is not a mapping or holds invalid values.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Checkerboard description must be a mapping, got {data!r}")
        defaults = cls()
        return cls(
            enabled=bool(data.get("enabled", defaults.enabled)),
            height=data.get("height", defaults.height),
            half_width=data.get("half_width", defaults.half_width),
            z_near=data.get("z_near", defaults.z_near),
            z_far=data.get("z_far", defaults.z_far),
            colour_a=data.get("colour_a", defaults.colour_a),
            colour_b=data.get("colour_b", defaults.colour_b),
            colour_scale=data.get("colour_scale", defaults.colour_scale),
        )


# =============================================================================
# Taichi Fields for Board State
# =============================================================================

_board_enabled = ti.field(dtype=ti.i32, shape=())
_board_height = ti.field(dtype=ti.f32, shape=())
_board_half_width = ti.field(dtype=ti.f32, shape=())
_board_z_near = ti.field(dtype=ti.f32, shape=())
_board_z_far = ti.field(dtype=ti.f32, shape=())
# Colours are stored pre-scaled
_board_colour_a = ti.Vector.field(3, dtype=ti.f32, shape=())
_board_colour_b = ti.Vector.field(3, dtype=ti.f32, shape=())


def setup_checkerboard(board: CheckerboardPlane) -> None:
    """Write a board configuration into the Taichi fields.

    Args:
        board: The board configuration. A disabled board is stored but
            ignored by intersection queries.
    """
    scale = board.colour_scale
    _board_enabled[None] = 1 if board.enabled else 0
    _board_height[None] = board.height
    _board_half_width[None] = board.half_width
    _board_z_near[None] = board.z_near
    _board_z_far[None] = board.z_far
    _board_colour_a[None] = [c * scale for c in board.colour_a]
    _board_colour_b[None] = [c * scale for c in board.colour_b]


def disable_checkerboard() -> None:
    """Remove the board from intersection queries."""
    _board_enabled[None] = 0


def is_checkerboard_enabled() -> bool:
    """Check if the board takes part in intersection queries."""
    return bool(_board_enabled[None])


@ti.func
def hit_checkerboard(origin: vec3, direction: vec3, t_max: ti.f32):
    """Intersect a ray with the bounded checkerboard.

    Args:
        origin: The starting point of the ray.
        direction: The unit direction of the ray.
        t_max: Hits at or beyond this distance are ignored (the closest
            sphere distance so far).

    Returns:
        A tuple (hit, t, point). ``hit`` is 1 when the ray meets the board
        inside its bounds at a positive distance below t_max.
    """
    hit = 0
    t = 0.0
    point = vec3(0.0, 0.0, 0.0)

    if _board_enabled[None] == 1 and ti.abs(direction.y) > PARALLEL_EPSILON:
        d = -(origin.y - _board_height[None]) / direction.y
        p = origin + direction * d
        inside = (
            ti.abs(p.x) < _board_half_width[None]
            and p.z < _board_z_near[None]
            and p.z > _board_z_far[None]
        )
        if d > 0.0 and d < t_max and inside:
            hit = 1
            t = d
            point = p

    return hit, t, point


@ti.func
def checkerboard_colour(point: vec3) -> vec3:
    """Procedural diffuse colour of the board at a point on it."""
    cell = ti.cast(ti.floor(0.5 * point.x), ti.i32) + ti.cast(ti.floor(0.5 * point.z), ti.i32)
    colour = _board_colour_b[None]
    # Bitwise parity is correct for negative cell sums too
    if (cell & 1) == 1:
        colour = _board_colour_a[None]
    return colour


@ti.func
def checkerboard_normal() -> vec3:
    """Upward normal of the board."""
    return vec3(0.0, 1.0, 0.0)

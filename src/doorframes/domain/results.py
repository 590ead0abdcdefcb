"""Result types for frame assembly."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ..contracts import SolidProtocol
from .corner_join import CutReport, JoinMode
from .vector_math import Vector3, subtract


class JointType(str, Enum):
    """How stiles and rails meet at the corners."""

    COPE_STICK = "cope_stick"
    MITER = "miter"


class CopingMode(str, Enum):
    """Rail end treatment used by a cope-and-stick frame."""

    BOOLEAN_SUBTRACT = "boolean_subtract"
    SQUARE_FALLBACK = "square_fallback"


@dataclass(frozen=True)
class FrameEnvelope:
    """World-space bounding box of a set of members."""

    minimum: Vector3
    maximum: Vector3

    @property
    def width(self) -> float:
        return self.maximum[0] - self.minimum[0]

    @property
    def thickness(self) -> float:
        return self.maximum[1] - self.minimum[1]

    @property
    def height(self) -> float:
        return self.maximum[2] - self.minimum[2]

    @property
    def size(self) -> Vector3:
        return subtract(self.maximum, self.minimum)

    @classmethod
    def of(cls, solids: tuple[SolidProtocol, ...] | list[SolidProtocol]) -> FrameEnvelope:
        """Union of the solids' world bounds.

        Raises:
            ValueError: If no solids are given.
        """
        if not solids:
            raise ValueError("Envelope needs at least one solid")
        minimums = [solid.bounds.minimum for solid in solids]
        maximums = [solid.bounds.maximum for solid in solids]
        return cls(
            minimum=(
                min(p[0] for p in minimums),
                min(p[1] for p in minimums),
                min(p[2] for p in minimums),
            ),
            maximum=(
                max(p[0] for p in maximums),
                max(p[1] for p in maximums),
                max(p[2] for p in maximums),
            ),
        )


@dataclass(frozen=True)
class JoinResult:
    """Outcome of building one five-piece frame.

    Attributes:
        stiles: Left and right stile solids.
        rails: Bottom and top rail solids.
        joint_type: Joint the frame was built with.
        miter_mode: Cut strategy reported for mitered frames; None for
            cope-and-stick.
        coping_mode: Rail end treatment for cope-and-stick; None for miters.
        warnings: Ordered, de-duplicated, user-visible warnings.
        reports: One entry per corner cut executed.
    """

    stiles: tuple[SolidProtocol, ...]
    rails: tuple[SolidProtocol, ...]
    joint_type: JointType
    miter_mode: JoinMode | None = None
    coping_mode: CopingMode | None = None
    warnings: tuple[str, ...] = field(default_factory=tuple)
    reports: tuple[CutReport, ...] = field(default_factory=tuple)

    @property
    def members(self) -> tuple[SolidProtocol, ...]:
        return self.stiles + self.rails

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    def bounds(self) -> FrameEnvelope:
        return FrameEnvelope.of(self.members)

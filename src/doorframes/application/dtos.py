"""Data transfer objects for the application layer."""

from __future__ import annotations

from dataclasses import dataclass, field

from doorframes.contracts import GeometryDocumentProtocol
from doorframes.domain import JoinResult


@dataclass
class BuildFrameOutput:
    """Output DTO of a frame build.

    Attributes:
        document: Document holding the built members (or left unchanged on error).
        result: Join result; None when the build failed.
        errors: Error messages if the build failed.
    """

    document: GeometryDocumentProtocol
    result: JoinResult | None = None
    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """Check if the frame was built successfully."""
        return len(self.errors) == 0 and self.result is not None

    @property
    def warnings(self) -> tuple[str, ...]:
        return self.result.warnings if self.result is not None else ()

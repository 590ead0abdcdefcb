"""Output formatters for built frames."""

from __future__ import annotations

import json
from typing import Any

from doorframes.application.dtos import BuildFrameOutput
from doorframes.contracts import SolidProtocol
from doorframes.domain import CutReport, JoinResult, member_role


def _point(values: tuple[float, float, float]) -> list[float]:
    return [round(value, 3) for value in values]


class FrameReportFormatter:
    """Formats a built frame as a plain-text report.

    Lists each member with its world bounds, the overall envelope, the
    joint and cut modes, and any warnings.
    """

    def __init__(self, include_cuts: bool = False) -> None:
        """Initialize formatter.

        Args:
            include_cuts: Whether to list every corner cut.
        """
        self._include_cuts = include_cuts

    def format(self, output: BuildFrameOutput) -> str:
        if not output.is_valid:
            lines = ["FRAME BUILD FAILED", "=" * 70]
            lines.extend(f"  - {error}" for error in output.errors)
            return "\n".join(lines)

        result = output.result
        assert result is not None
        envelope = result.bounds()
        lines = [
            "FIVE-PIECE FRAME",
            "=" * 70,
            f"Joint:       {result.joint_type.value}",
        ]
        if result.miter_mode is not None:
            lines.append(f"Miter mode:  {result.miter_mode.value}")
        if result.coping_mode is not None:
            lines.append(f"Rail ends:   {result.coping_mode.value}")
        lines.append(
            f"Envelope:    {envelope.width:.3f} x {envelope.height:.3f} x "
            f"{envelope.thickness:.3f} mm (W x H x T)"
        )
        lines.extend(
            [
                "",
                f"{'Member':<14} {'Role':<7} {'X min':>9} {'X max':>9} {'Z min':>9} {'Z max':>9}",
                "-" * 70,
            ]
        )
        for member in result.members:
            lines.append(self._format_member(member))

        if self._include_cuts and result.reports:
            lines.extend(["", "CORNER CUTS", "-" * 70])
            lines.extend(self._format_cut(report) for report in result.reports)

        if result.warnings:
            lines.extend(["", "WARNINGS"])
            lines.extend(f"  - {warning}" for warning in result.warnings)

        return "\n".join(lines)

    def _format_member(self, member: SolidProtocol) -> str:
        bounds = member.bounds
        role = member_role(member)
        return (
            f"{member.name:<14} {role.value if role else '-':<7} "
            f"{bounds.minimum[0]:>9.3f} {bounds.maximum[0]:>9.3f} "
            f"{bounds.minimum[2]:>9.3f} {bounds.maximum[2]:>9.3f}"
        )

    def _format_cut(self, report: CutReport) -> str:
        mode = "uncut" if report.restored else report.mode.value
        line = (
            f"{report.member_name:<14} {mode:<10} keep {report.keep.value:<9} "
            f"volume {report.volume_before:.0f} -> {report.volume_after:.0f} mm3"
        )
        if report.fallback_reason:
            line += f" (fallback: {report.fallback_reason})"
        return line


class JsonExporter:
    """Exports frame build data as JSON."""

    def export(self, output: BuildFrameOutput) -> str:
        """Export build output as JSON string."""
        if not output.is_valid:
            return json.dumps({"errors": output.errors}, indent=2)
        assert output.result is not None
        return json.dumps(self.to_dict(output.result), indent=2)

    def to_dict(self, result: JoinResult) -> dict[str, Any]:
        envelope = result.bounds()
        return {
            "joint_type": result.joint_type.value,
            "miter_mode": result.miter_mode.value if result.miter_mode else None,
            "coping_mode": result.coping_mode.value if result.coping_mode else None,
            "envelope": {
                "width": round(envelope.width, 3),
                "height": round(envelope.height, 3),
                "thickness": round(envelope.thickness, 3),
            },
            "members": [self._format_member(member) for member in result.members],
            "cuts": [self._format_cut(report) for report in result.reports],
            "warnings": list(result.warnings),
        }

    def _format_member(self, member: SolidProtocol) -> dict[str, Any]:
        bounds = member.bounds
        role = member_role(member)
        return {
            "name": member.name,
            "role": role.value if role else None,
            "tag": member.tag,
            "material": member.material,
            "minimum": _point(bounds.minimum),
            "maximum": _point(bounds.maximum),
            "volume": round(member.volume, 3),
        }

    def _format_cut(self, report: CutReport) -> dict[str, Any]:
        return {
            "member": report.member_name,
            "mode": report.mode.value,
            "keep": report.keep.value,
            "plane_point": _point(report.plane_point),
            "plane_normal": _point(report.plane_normal),
            "volume_before": round(report.volume_before, 3),
            "volume_after": round(report.volume_after, 3),
            "restored": report.restored,
            "new_edges": report.new_edges_count,
            "caps": report.cap_count,
            "fallback_reason": report.fallback_reason,
        }

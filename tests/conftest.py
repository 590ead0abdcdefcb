"""Pytest configuration and shared fixtures for frame tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from doorframes.domain import FrameParameters, JointType
from doorframes.infrastructure.brep import BrepDocument, BrepSolid


# =============================================================================
# Geometry helpers
# =============================================================================


def _make_box(
    document: BrepDocument,
    name: str,
    origin: tuple[float, float, float],
    size: tuple[float, float, float],
) -> BrepSolid:
    """Create an axis-aligned box solid with outward-facing faces."""
    ox, oy, oz = origin
    sx, sy, sz = size
    solid = document.add_solid(name)
    face = solid.add_face(
        [(ox, oy, oz), (ox + sx, oy, oz), (ox + sx, oy + sy, oz), (ox, oy + sy, oz)]
    )
    solid.pushpull(face, sz)
    return solid


@pytest.fixture
def make_box():
    """Factory for axis-aligned box solids: ``make_box(document, name, origin, size)``."""
    return _make_box


# =============================================================================
# Documents
# =============================================================================


@pytest.fixture
def document() -> BrepDocument:
    """Document offering solid boolean subtraction."""
    return BrepDocument(name="Test")


@pytest.fixture
def document_without_booleans() -> BrepDocument:
    """Document whose session has no solid booleans."""
    return BrepDocument(supports_solid_booleans=False, name="Test")


# =============================================================================
# Frame parameters
# =============================================================================


@pytest.fixture
def cope_parameters() -> FrameParameters:
    """Shaker cope-and-stick frame around a 500 x 700 opening."""
    return FrameParameters(
        opening_width_mm=500.0,
        opening_height_mm=700.0,
        stile_width_mm=57.0,
        rail_width_mm=57.0,
        door_thickness_mm=19.0,
        joint_type=JointType.COPE_STICK,
    )


@pytest.fixture
def miter_parameters() -> FrameParameters:
    """Square-edged mitered frame around a 500 x 700 opening."""
    return FrameParameters(
        opening_width_mm=500.0,
        opening_height_mm=700.0,
        stile_width_mm=57.0,
        rail_width_mm=57.0,
        door_thickness_mm=19.0,
        joint_type=JointType.MITER,
        inside_profile_id="square_inside",
    )


# =============================================================================
# Configuration files
# =============================================================================


@pytest.fixture
def config_data() -> dict[str, Any]:
    """A complete, valid configuration dictionary."""
    return {
        "schema_version": "1.0",
        "frame": {
            "opening_width": 500,
            "opening_height": 700,
            "stile_width": 57,
            "door_thickness": 19,
            "joint_type": "cope_stick",
            "inside_profile_id": "shaker_inside",
            "frame_material": "Maple",
        },
        "output": {"format": "text"},
    }


@pytest.fixture
def write_config(tmp_path: Path):
    """Write a configuration dictionary (or raw text) to a JSON file."""

    def _write(data: dict[str, Any] | str, name: str = "door.json") -> Path:
        path = tmp_path / name
        if isinstance(data, str):
            path.write_text(data, encoding="utf-8")
        else:
            path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write

"""Unit tests for stile and rail member construction and metadata."""

import pytest

from doorframes.domain import (
    FRAME_DICTIONARY,
    MemberRole,
    ProfileKind,
    apply_member_metadata,
    build_rail,
    build_stile,
    member_role,
    rail_profile,
    remove_existing_frame_members,
    solid_booleans_available,
    stile_profile,
    translate_member,
)
from doorframes.infrastructure.brep import BrepDocument


@pytest.fixture
def square_stile_profile():
    return stile_profile(57.0, 19.0, 6.0, 2.0, kind=ProfileKind.SQUARE)


class TestBuildStile:
    """Tests for build_stile."""

    def test_extrudes_up_from_origin(self, document: BrepDocument, square_stile_profile) -> None:
        stile = build_stile(document, square_stile_profile, 814.0, "Stile-L")

        assert stile.name == "Stile-L"
        assert stile.bounds.minimum == pytest.approx((0.0, 0.0, 0.0))
        assert stile.bounds.maximum == pytest.approx((57.0, 19.0, 814.0))
        assert stile.volume == pytest.approx(57.0 * 19.0 * 814.0)
        assert stile.is_manifold()

    def test_shaker_stile_has_seven_faces(self, document: BrepDocument) -> None:
        profile = stile_profile(57.0, 19.0, 6.0, 2.0)
        stile = build_stile(document, profile, 100.0)

        assert len(stile.faces) == 7
        assert stile.volume == pytest.approx((57.0 * 19.0 - 6.0) * 100.0)

    def test_mirrored_profile_still_extrudes_up(self, document: BrepDocument) -> None:
        profile = stile_profile(57.0, 19.0, 6.0, 2.0, inside_edge="left")
        stile = build_stile(document, profile, 100.0)

        assert stile.bounds.maximum[2] == pytest.approx(100.0)
        assert stile.volume > 0


class TestBuildRail:
    """Tests for build_rail."""

    def test_extrudes_along_x(self, document: BrepDocument) -> None:
        profile = rail_profile(57.0, 19.0, 6.0, 2.0, kind=ProfileKind.SQUARE)
        rail = build_rail(document, profile, 500.0, "Rail-Bottom")

        assert rail.bounds.minimum == pytest.approx((0.0, 0.0, 0.0))
        assert rail.bounds.maximum == pytest.approx((500.0, 19.0, 57.0))
        assert rail.volume == pytest.approx(500.0 * 19.0 * 57.0)

    def test_top_rail_profile_sits_on_bottom_edge(self, document: BrepDocument) -> None:
        """The top rail's bevel is on its lower (inside) edge at the front."""
        profile = rail_profile(57.0, 19.0, 6.0, 2.0, inside_edge="bottom")
        rail = build_rail(document, profile, 500.0)
        front_points = [v.position for v in rail.vertices if v.position[1] == 0.0]

        assert min(p[2] for p in front_points) == pytest.approx(2.0)


class TestPlacementAndMetadata:
    """Tests for translate_member and member metadata."""

    def test_translate_member(self, document: BrepDocument, square_stile_profile) -> None:
        stile = build_stile(document, square_stile_profile, 814.0)
        translate_member(stile, x=557.0)

        assert stile.bounds.minimum[0] == pytest.approx(557.0)
        assert stile.bounds.maximum[0] == pytest.approx(614.0)

    def test_apply_member_metadata(self, document: BrepDocument, square_stile_profile) -> None:
        stile = build_stile(document, square_stile_profile, 814.0)
        apply_member_metadata(stile, MemberRole.STILE, "Stile-L", tag="Fronts", material="Maple")

        assert stile.name == "Stile-L"
        assert stile.tag == "Fronts"
        assert stile.material == "Maple"
        assert all(face.material == "Maple" for face in stile.faces)
        assert stile.attribute_dictionary(FRAME_DICTIONARY) == {"role": "stile"}
        assert member_role(stile) == MemberRole.STILE

    def test_untagged_solid_has_no_role(self, document: BrepDocument) -> None:
        assert member_role(document.add_solid("Other")) is None

    def test_remove_existing_frame_members(
        self, document: BrepDocument, square_stile_profile
    ) -> None:
        stile = build_stile(document, square_stile_profile, 814.0)
        apply_member_metadata(stile, MemberRole.STILE, "Stile-L")
        other = document.add_solid("Panel")

        assert remove_existing_frame_members(document) == 1
        assert document.entities == [other]
        assert remove_existing_frame_members(document) == 0


class TestCapabilities:
    """Tests for solid_booleans_available."""

    def test_document_with_booleans(self, document: BrepDocument) -> None:
        assert solid_booleans_available(document) is True

    def test_document_without_booleans(self, document_without_booleans: BrepDocument) -> None:
        assert solid_booleans_available(document_without_booleans) is False

    def test_flag_without_subtract(self) -> None:
        class FlagOnly:
            supports_solid_booleans = True

        assert solid_booleans_available(FlagOnly()) is False

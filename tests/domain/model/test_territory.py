from __future__ import annotations

import pytest

from pixelsync.domain.model import (
    FromSurfaceScan,
    Sovereignty,
    SurfaceMapping,
    Synthesized,
    build_territory,
    normalize_owner_ref,
    parse_sovereignty,
)


@pytest.mark.parametrize("raw", [None, "", "  ", "null", "NULL", "undefined", "None"])
def test_normalize_owner_ref_treats_placeholders_as_unowned(raw: object) -> None:
    assert normalize_owner_ref(raw) is None


def test_normalize_owner_ref_keeps_real_owner_trimmed() -> None:
    assert normalize_owner_ref("  0xabc ") == "0xabc"


def test_parse_sovereignty_falls_back_to_unconquered() -> None:
    assert parse_sovereignty("RULED") is Sovereignty.RULED
    assert parse_sovereignty("protected") is Sovereignty.PROTECTED
    assert parse_sovereignty("annexed") is Sovereignty.UNCONQUERED
    assert parse_sovereignty(None) is Sovereignty.UNCONQUERED


def test_build_territory_normalizes_boundary_values() -> None:
    mapping = SurfaceMapping(surface_id="countries", feature_id="7")

    territory = build_territory(
        territory_id="france",
        owner_ref="null",
        sovereignty="bogus",
        surface_mapping=mapping,
        name="",
        provenance=FromSurfaceScan(surface_id="countries", feature_id="7"),
    )

    assert territory.owner_ref is None
    assert territory.sovereignty is Sovereignty.UNCONQUERED
    assert territory.surface_mapping == mapping
    assert territory.name is None
    assert isinstance(territory.provenance, FromSurfaceScan)


def test_build_territory_defaults_to_synthesized_provenance() -> None:
    territory = build_territory(territory_id="spain", owner_ref="bob", sovereignty="ruled")

    assert isinstance(territory.provenance, Synthesized)
    assert territory.has_owner


def test_copy_keeps_ownership_of_the_moment() -> None:
    territory = build_territory(territory_id="france", owner_ref="alice", sovereignty="RULED")
    snapshot = territory.copy()

    assert not territory.ownership_differs(snapshot)

    territory.sovereignty = Sovereignty.PROTECTED

    assert territory.ownership_differs(snapshot)
    assert snapshot.sovereignty is Sovereignty.RULED
    assert snapshot.owner_ref == "alice"

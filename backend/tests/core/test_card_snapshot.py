"""Card Snapshot — tests for record projection and variant selection."""

import pytest

from cardpreview.core.card_snapshot import CardSnapshot, snapshot_from_record
from cardpreview.core.domain_types import CardVariant


def _record(**overrides):
    record = {
        "id": "0b7c4f4e-58a4-4a3c-9a55-3f6d3c1c2b10",
        "slug": "jane",
        "full_name": "Jane Doe",
        "title": "Engineer",
        "company": "Acme",
        "city": "Austin",
        "state": "TX",
        "profile_photo_url": None,
        "template_layout": "classic",
        "gradient_color_1": None,
    }
    record.update(overrides)
    return record


def test_projection_normalizes_blank_strings():
    snapshot = snapshot_from_record(_record(title="   ", company=""))
    assert snapshot.title is None
    assert snapshot.company is None
    assert snapshot.full_name == "Jane Doe"


def test_projection_tolerates_missing_optional_columns():
    snapshot = snapshot_from_record({"id": 7})
    assert snapshot.card_id == "7"
    assert snapshot.ballot_number is None
    assert snapshot.variant is CardVariant.STANDARD


@pytest.mark.parametrize(
    "layout", ["civic-card", "civic-card-flag", "civic-card-v2", "politician-generic"],
)
def test_civic_prefix_selects_civic_variant(layout):
    assert snapshot_from_record(_record(template_layout=layout)).variant is CardVariant.CIVIC


@pytest.mark.parametrize(
    "layout",
    [None, "", "classic", "my-civic-card", "Civic-Card", "politician-generic-v2"],
)
def test_other_layouts_are_standard(layout):
    assert snapshot_from_record(_record(template_layout=layout)).variant is CardVariant.STANDARD


def test_custom_civic_prefix():
    snapshot = snapshot_from_record(_record(template_layout="campaign-a"), civic_prefix="campaign")
    assert snapshot.variant is CardVariant.CIVIC


def test_accent_color_accepts_hex_only():
    assert snapshot_from_record(_record(gradient_color_1="#1E40AF")).accent_color == "#1E40AF"
    assert snapshot_from_record(_record(gradient_color_1="#fff")).accent_color == "#fff"
    assert snapshot_from_record(_record(gradient_color_1="red; x")).accent_color is None


def test_location_joins_city_and_state():
    assert CardSnapshot(card_id="1", city="Austin", state="TX").location == "Austin, TX"
    assert CardSnapshot(card_id="1", state="TX").location == "TX"
    assert CardSnapshot(card_id="1").location is None


def test_snapshot_is_frozen():
    snapshot = snapshot_from_record(_record())
    with pytest.raises(AttributeError):
        snapshot.full_name = "Other"

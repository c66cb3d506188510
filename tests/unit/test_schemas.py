"""Unit tests for cms.domains.content.schemas"""

import pytest

from cms.domains.content.defaults import DEFAULT_ENVIRONMENT
from cms.domains.content.errors import InvalidPayloadError
from cms.domains.content.schemas import (
    EnvironmentImpact, Feature, InstagramReel, Testimonial, check_environment_payload, extract_reel_id, field_patch,
    merge_with_defaults,
)


def _environment_payload(**overrides):
    payload = {
        "headline": "Impact",
        "subheadline": "Every ride counts",
        "defaultRides": 12,
        "co2PerRide": 2.1,
        "treesEquivalent": 0.2,
        "metricsLabels": {"rides": "Rides", "co2Saved": "CO2", "treesEquiv": "Trees"},
    }
    payload.update(overrides)
    return payload


def test_merge_with_defaults_nested():
    """Stored values win, missing nested keys fall back to defaults."""
    defaults = {"headline": "Default", "metricsLabels": {"rides": "Rides", "co2Saved": "CO2"}}
    stored = {"headline": "Stored", "metricsLabels": {"rides": "Trips"}}

    merged = merge_with_defaults(stored, defaults)
    assert merged == {"headline": "Stored", "metricsLabels": {"rides": "Trips", "co2Saved": "CO2"}}


def test_merge_with_defaults_treats_null_as_missing_and_replaces_lists():
    merged = merge_with_defaults({"title": None, "points": ["b"]}, {"title": "T", "points": ["a", "c"]})
    assert merged == {"title": "T", "points": ["b"]}


def test_merge_with_defaults_does_not_mutate_defaults():
    defaults = {"nested": {"a": 1}}
    merge_with_defaults({"nested": {"a": 2}}, defaults)
    assert defaults == {"nested": {"a": 1}}


def test_merge_with_no_stored_document_returns_defaults():
    assert merge_with_defaults(None, {"a": 1}) == {"a": 1}


def test_documents_use_camel_case_keys():
    body = DEFAULT_ENVIRONMENT.to_document()
    assert body["co2PerRide"] == 2.5
    assert body["metricsLabels"]["treesEquiv"] == "Trees Equivalent"
    assert body["schemaVersion"] == 1


def test_models_accept_camel_and_snake_case():
    assert Feature.model_validate({"isActive": False}).is_active is False
    assert Feature.model_validate({"is_active": False}).is_active is False


def test_field_patch_maps_aliases_and_drops_unknown_keys():
    assert field_patch(Testimonial, {"avatarUrl": "a.png", "rating": 4, "bogus": 1}) == {
        "avatar_url": "a.png",
        "rating": 4,
    }


def test_testimonial_rating_bounds():
    with pytest.raises(ValueError):
        Testimonial(rating=6)


@pytest.mark.parametrize("url, expected", [
    ("https://www.instagram.com/reel/C8abc_12-x/", "C8abc_12-x"),
    ("https://instagram.com/reel/XYZ?igsh=1", "XYZ"),
    ("C8abc", "C8abc"),
])
def test_extract_reel_id(url, expected):
    assert extract_reel_id(url) == expected


def test_reel_model_keeps_only_the_reel_id():
    assert InstagramReel(reel_id="https://www.instagram.com/reel/DDxfo_TTOZF/").reel_id == "DDxfo_TTOZF"
    assert InstagramReel.model_validate({"reelId": "DDxfo_TTOZF"}).reel_id == "DDxfo_TTOZF"


def test_environment_payload_accepts_valid_body():
    payload = _environment_payload()
    check_environment_payload(payload)
    assert EnvironmentImpact.model_validate(payload).co2_per_ride == 2.1


@pytest.mark.parametrize("missing", ["headline", "subheadline", "metricsLabels"])
def test_environment_payload_requires_fields(missing):
    payload = _environment_payload()
    del payload[missing]
    with pytest.raises(InvalidPayloadError, match="Missing required fields"):
        check_environment_payload(payload)


@pytest.mark.parametrize("value", ["10", None, True, [1]])
def test_environment_payload_rejects_non_numbers(value):
    with pytest.raises(InvalidPayloadError, match="Invalid numeric fields"):
        check_environment_payload(_environment_payload(defaultRides=value))


def test_environment_payload_allows_empty_metrics_labels():
    check_environment_payload(_environment_payload(metricsLabels={}))


@pytest.mark.parametrize("value", [None, ""])
def test_environment_payload_rejects_blank_headline(value):
    with pytest.raises(InvalidPayloadError, match="Missing required fields"):
        check_environment_payload(_environment_payload(headline=value))

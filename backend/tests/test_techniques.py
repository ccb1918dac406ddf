import pytest

from tranquil.services.techniques import (
    CATALOG, Technique, TechniqueProfile, UnknownTechniqueError,
    get_technique, list_techniques, validate_catalog,
)


def test_catalog_is_valid():
    validate_catalog()


@pytest.mark.parametrize(
    "key, timings",
    [
        ("box", (4, 4, 4, 5)),
        ("deep", (4, 0, 6, 5)),
        ("478", (4, 7, 8, 4)),
        ("alternate", (4, 4, 4, 5)),
    ],
)
def test_technique_timings(key, timings):
    profile = get_technique(key)
    assert (
        profile.inhale_seconds, profile.hold_seconds,
        profile.exhale_seconds, profile.cycle_count,
    ) == timings


def test_enum_and_string_lookup_agree():
    assert get_technique(Technique.FOUR_SEVEN_EIGHT) is get_technique("478")


def test_unknown_key_raises():
    with pytest.raises(UnknownTechniqueError):
        get_technique("478-breathing")
    with pytest.raises(KeyError):
        get_technique("")


def test_hold_floor_in_durations():
    deep = get_technique("deep")
    assert deep.effective_hold_seconds == 1
    assert deep.cycle_seconds == 11
    assert deep.total_seconds == 55


def test_list_follows_enum_order():
    assert [t for t, _ in list_techniques()] == list(Technique)


def test_validate_catalog_rejects_missing_entry():
    partial = {k: v for k, v in CATALOG.items() if k is not Technique.DEEP}
    with pytest.raises(ValueError, match="deep"):
        validate_catalog(partial)


def test_validate_catalog_rejects_bad_timings():
    broken = dict(CATALOG)
    broken[Technique.BOX] = TechniqueProfile(
        name="Broken", description="", inhale_seconds=0,
        hold_seconds=4, exhale_seconds=4, cycle_count=5,
    )
    with pytest.raises(ValueError, match="box"):
        validate_catalog(broken)

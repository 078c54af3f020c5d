"""Tests for disabled-reason formatting."""

import pytest

from filterforge.exclusion.reasons import (
    ReasonKind,
    attribute_label,
    field_label,
    format_disabled_reason,
    input_sources,
    join_labels,
)


class TestFieldInputReasons:
    def test_single_field(self) -> None:
        assert format_disabled_reason(ReasonKind.FIELD_INPUT, "level-rank") == "Level/Rank is set"

    def test_two_fields(self) -> None:
        result = format_disabled_reason("field-to-attribute", ["level-rank", "def"])
        assert result == "Level/Rank and DEF are set"

    def test_three_fields(self) -> None:
        result = format_disabled_reason(ReasonKind.FIELD_INPUT, ["atk", "def", "level-rank"])
        assert result == "ATK, DEF and Level/Rank are set"

    def test_unknown_field_shown_verbatim(self) -> None:
        result = format_disabled_reason(ReasonKind.FIELD_INPUT, "unknown-field")
        assert result == "unknown-field is set"


class TestAttributeReasons:
    @pytest.mark.parametrize(
        ("attr", "expected"),
        [
            ("monster-type_fusion", "Fusion is selected"),
            ("card-type_spell", "Spell is selected"),
            ("attribute_water", "WATER is selected"),
            ("race_dragon", "Dragon is selected"),
            ("spell-type_quick", "Quick-Play Spell is selected"),
            ("trap-type_counter", "Counter Trap is selected"),
        ],
    )
    def test_exclusion_reason(self, attr: str, expected: str) -> None:
        assert format_disabled_reason(ReasonKind.EXCLUSION, attr) == expected

    def test_side_effect_reason(self) -> None:
        result = format_disabled_reason(ReasonKind.SIDE_EFFECT, "monster-type_link")
        assert result == "Link is selected"

    def test_several_required_members(self) -> None:
        result = format_disabled_reason(
            ReasonKind.EXCLUSION, ["monster-type_link", "monster-type_pendulum"]
        )
        assert result == "Link and Pendulum are selected"

    def test_unavailable_reason(self) -> None:
        result = format_disabled_reason(ReasonKind.UNAVAILABLE, ["monster-type_link"])
        assert result == "Link cannot be selected"

    def test_invalid_kind_raises(self) -> None:
        with pytest.raises(ValueError):
            format_disabled_reason("no-such-kind", "level-rank")


class TestLabels:
    def test_hyphenated_race(self) -> None:
        assert attribute_label("race_winged-beast") == "Winged Beast"

    def test_unknown_group_falls_back_to_identifier(self) -> None:
        assert attribute_label("rarity_secret") == "rarity_secret"

    def test_unknown_value_falls_back_to_value(self) -> None:
        assert attribute_label("monster-type_maximum") == "maximum"

    def test_identifier_without_group(self) -> None:
        assert attribute_label("custom-attr") == "custom-attr"

    def test_field_label(self) -> None:
        assert field_label("p-scale") == "Pendulum Scale"
        assert field_label("mystery") == "mystery"

    def test_join_labels(self) -> None:
        assert join_labels([]) == ""
        assert join_labels(["A"]) == "A"
        assert join_labels(["A", "B"]) == "A and B"
        assert join_labels(["A", "B", "C"]) == "A, B and C"


class TestInputSources:
    """A reason only names fields the user actually filled in."""

    def test_only_level_rank_filled(self) -> None:
        inputs = {"level-rank": True, "def": False}
        assert input_sources(["level-rank", "def"], inputs) == ["level-rank"]

    def test_both_filled(self) -> None:
        inputs = {"level-rank": True, "def": True}
        assert input_sources(["level-rank", "def"], inputs) == ["level-rank", "def"]

    def test_none_filled(self) -> None:
        assert input_sources(["level-rank", "def"], {}) == []

    def test_link_value_only(self) -> None:
        inputs = {"link-value": True, "link-marker": False}
        assert input_sources(["link-value", "link-marker"], inputs) == ["link-value"]

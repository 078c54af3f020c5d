"""
Disabled-reason text for greyed-out controls.

Turns the identifiers behind a disabling ("level-rank", "monster-type_link")
into the sentence shown next to the control, e.g. "Level/Rank is set" or
"Link is selected".

Reasons only ever name fields the user actually filled in. A rule may fire
on several trigger fields; input_sources() drops the empty ones first.
"""

from collections.abc import Iterable, Mapping
from enum import Enum


class ReasonKind(str, Enum):
    """Why a control was disabled."""

    FIELD_INPUT = "field-to-attribute"
    EXCLUSION = "attribute-exclusion"
    SIDE_EFFECT = "attribute-to-field"
    UNAVAILABLE = "attribute-unavailable"


CARD_TYPE_LABELS: dict[str, str] = {
    "monster": "Monster",
    "spell": "Spell",
    "trap": "Trap",
}

MONSTER_TYPE_LABELS: dict[str, str] = {
    "normal": "Normal",
    "effect": "Effect",
    "fusion": "Fusion",
    "ritual": "Ritual",
    "synchro": "Synchro",
    "xyz": "Xyz",
    "pendulum": "Pendulum",
    "link": "Link",
    "tuner": "Tuner",
    "spirit": "Spirit",
    "union": "Union",
    "gemini": "Gemini",
    "flip": "Flip",
    "toon": "Toon",
    "special": "Special Summon",
}

ATTRIBUTE_LABELS: dict[str, str] = {
    "light": "LIGHT",
    "dark": "DARK",
    "water": "WATER",
    "fire": "FIRE",
    "earth": "EARTH",
    "wind": "WIND",
    "divine": "DIVINE",
}

SPELL_TYPE_LABELS: dict[str, str] = {
    "normal": "Normal Spell",
    "quick": "Quick-Play Spell",
    "continuous": "Continuous Spell",
    "equip": "Equip Spell",
    "field": "Field Spell",
    "ritual": "Ritual Spell",
}

TRAP_TYPE_LABELS: dict[str, str] = {
    "normal": "Normal Trap",
    "continuous": "Continuous Trap",
    "counter": "Counter Trap",
}

FIELD_LABELS: dict[str, str] = {
    "level-rank": "Level/Rank",
    "link-value": "Link Rating",
    "link-marker": "Link Arrows",
    "p-scale": "Pendulum Scale",
    "atk": "ATK",
    "def": "DEF",
    "attribute": "Attribute",
    "race": "Race",
    "monster-type": "Monster Type",
    "spell-type": "Spell Type",
    "trap-type": "Trap Type",
}

_GROUP_LABELS: dict[str, dict[str, str]] = {
    "card-type": CARD_TYPE_LABELS,
    "monster-type": MONSTER_TYPE_LABELS,
    "attribute": ATTRIBUTE_LABELS,
    "spell-type": SPELL_TYPE_LABELS,
    "trap-type": TRAP_TYPE_LABELS,
}


def attribute_label(attr: str) -> str:
    """
    Display label for an attribute identifier.

    "monster-type_fusion" -> "Fusion", "race_winged-beast" -> "Winged Beast".
    Unknown groups and values fall back to the raw identifier.
    """
    group, sep, value = attr.partition("_")
    if not sep:
        return attr
    if group == "race":
        return value.replace("-", " ").title()
    labels = _GROUP_LABELS.get(group)
    if labels is None:
        return attr
    return labels.get(value, value)


def field_label(field_name: str) -> str:
    return FIELD_LABELS.get(field_name, field_name)


def join_labels(labels: list[str]) -> str:
    """["A"] -> "A", ["A", "B"] -> "A and B", ["A", "B", "C"] -> "A, B and C"."""
    if not labels:
        return ""
    if len(labels) == 1:
        return labels[0]
    return f"{', '.join(labels[:-1])} and {labels[-1]}"


def input_sources(sources: Iterable[str], field_inputs: Mapping[str, bool]) -> list[str]:
    """Keep only the source fields that actually hold a value, preserving order."""
    return [name for name in sources if field_inputs.get(name, False)]


def format_disabled_reason(kind: ReasonKind | str, sources: str | Iterable[str]) -> str:
    """
    Format the display text for a disabled control.

    Args:
        kind: Which rule pass disabled the control
        sources: Field names (FIELD_INPUT) or attribute identifiers (other kinds)

    Returns:
        Sentence such as "Level/Rank and DEF are set" or "Fusion is selected".
    """
    kind = ReasonKind(kind)
    names = [sources] if isinstance(sources, str) else list(sources)

    if kind == ReasonKind.FIELD_INPUT:
        labels = [field_label(name) for name in names]
        verb = "is" if len(labels) == 1 else "are"
        return f"{join_labels(labels)} {verb} set"

    labels = [attribute_label(name) for name in names]
    verb = "is" if len(labels) == 1 else "are"
    if kind == ReasonKind.UNAVAILABLE:
        return f"{join_labels(labels)} cannot be selected"
    return f"{join_labels(labels)} {verb} selected"

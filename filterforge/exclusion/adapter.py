"""
Adapter from the dialog's SearchFilters to the engine's ConditionState.

Discrete choices become "<group>_<value>" attributes. List and range inputs
become "has input" flags. Monster sub-types marked "not" are exclusions,
not positive selections, so they never become attributes and never count as
monster-type input: "not Fusion" is satisfied by any Spell or Trap.
"""

from collections.abc import Callable

from filterforge.models.condition import ConditionState
from filterforge.models.filters import MonsterTypeState, SearchFilters


def _has_included_monster_type(filters: SearchFilters) -> bool:
    return any(term.state == MonsterTypeState.NORMAL for term in filters.monster_types)


FIELD_INPUT_CHECKS: dict[str, Callable[[SearchFilters], bool]] = {
    "link-value": lambda f: len(f.link_values) > 0,
    "link-marker": lambda f: len(f.link_markers) > 0,
    "p-scale": lambda f: len(f.scale_values) > 0,
    "level-rank": lambda f: len(f.level_values) > 0,
    "atk": lambda f: f.atk.has_input(),
    "def": lambda f: f.def_.has_input(),
    "attribute": lambda f: len(f.attributes) > 0,
    "race": lambda f: len(f.races) > 0,
    "monster-type": _has_included_monster_type,
    "spell-type": lambda f: len(f.spell_types) > 0,
    "trap-type": lambda f: len(f.trap_types) > 0,
}


def has_field_input(field_name: str, filters: SearchFilters) -> bool:
    """Check whether a field holds a value. Unknown fields never do."""
    check = FIELD_INPUT_CHECKS.get(field_name)
    return check(filters) if check is not None else False


def selected_attributes(filters: SearchFilters) -> list[str]:
    """Attributes chosen directly in the dialog, in dialog order."""
    selected: list[str] = []

    if filters.card_type:
        selected.append(f"card-type_{filters.card_type}")
    selected.extend(f"attribute_{value}" for value in filters.attributes)
    selected.extend(f"spell-type_{value}" for value in filters.spell_types)
    selected.extend(f"trap-type_{value}" for value in filters.trap_types)
    selected.extend(f"race_{value}" for value in filters.races)
    selected.extend(
        f"monster-type_{term.type}"
        for term in filters.monster_types
        if term.state == MonsterTypeState.NORMAL
    )

    return selected


def to_condition_state(filters: SearchFilters) -> ConditionState:
    """
    Convert dialog filters into the engine's condition state.

    Every known field gets an explicit flag, defaulting to False.
    """
    return ConditionState(
        mode=filters.monster_type_match_mode,
        selected_attributes=frozenset(selected_attributes(filters)),
        field_inputs={name: has_field_input(name, filters) for name in FIELD_INPUT_CHECKS},
    )

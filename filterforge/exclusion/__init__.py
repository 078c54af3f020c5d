"""
Search-condition exclusion inference.

Decides which search dialog controls are usable, forced, or contradictory
given everything else the user has selected or filled in.
"""

from filterforge.exclusion.adapter import (
    FIELD_INPUT_CHECKS,
    has_field_input,
    selected_attributes,
    to_condition_state,
)
from filterforge.exclusion.engine import infer
from filterforge.exclusion.reasons import (
    ReasonKind,
    attribute_label,
    field_label,
    format_disabled_reason,
    input_sources,
)
from filterforge.exclusion.repository import (
    DEFAULT_RULES_PATH,
    get_rules,
    load_rules,
    parse_rules,
)

__all__ = [
    # Adapter
    "FIELD_INPUT_CHECKS",
    "has_field_input",
    "selected_attributes",
    "to_condition_state",
    # Engine
    "infer",
    # Reasons
    "ReasonKind",
    "attribute_label",
    "field_label",
    "format_disabled_reason",
    "input_sources",
    # Repository
    "DEFAULT_RULES_PATH",
    "get_rules",
    "load_rules",
    "parse_rules",
]

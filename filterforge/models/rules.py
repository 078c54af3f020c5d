"""
Exclusion rule model.

Three closed rule variants describe how search filter controls depend on
each other:

- FieldRequirementRule: input in a field forces (or rules out) attributes
- ExclusionGroup: at most one member of the group can describe a card
- AttributeSideEffectRule: an active attribute makes fields meaningless

Rules are plain immutable data. All interpretation lives in the engine.

WILDCARDS: a trigger pattern ending in "*" matches every field starting with
the text before it. No other glob or regex syntax is supported.
"""

from dataclasses import asdict, dataclass
from typing import Any

WILDCARD = "*"


def matches_pattern(pattern: str, field_name: str) -> bool:
    """Check whether a field name matches a trigger pattern (prefix wildcard only)."""
    if pattern.endswith(WILDCARD):
        return field_name.startswith(pattern[: -len(WILDCARD)])
    return field_name == pattern


@dataclass(frozen=True, slots=True)
class FieldRequirementRule:
    """
    Field -> attribute rule.

    Attributes:
        title: Human-readable rule name (diagnostics only)
        trigger_patterns: Field names or prefix wildcards that fire the rule
        target: Attributes that become required while the rule fires
        excluded: Attributes that become unavailable while the rule fires
    """

    title: str
    trigger_patterns: tuple[str, ...]
    target: tuple[str, ...] = ()
    excluded: tuple[str, ...] = ()

    def matches(self, field_name: str) -> bool:
        return any(matches_pattern(p, field_name) for p in self.trigger_patterns)


@dataclass(frozen=True, slots=True)
class ExclusionGroup:
    """
    Attributes that cannot describe the same card at once.

    mode_sensitive marks the monster sub-type groups, where OR mode lets
    directly selected members coexist.
    """

    title: str
    items: tuple[str, ...]
    mode_sensitive: bool = False


@dataclass(frozen=True, slots=True)
class AttributeSideEffectRule:
    """Attribute -> field rule: an active trigger disables the negative fields."""

    title: str
    trigger: str
    negative_fields: tuple[str, ...]


def _unique(values: list[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(values))


@dataclass(frozen=True, slots=True)
class RuleSet:
    """
    Immutable collection of all exclusion rules.

    Each collection keeps declaration order, which is also application order.
    """

    field_to_attribute: tuple[FieldRequirementRule, ...] = ()
    attribute_exclusion_groups: tuple[ExclusionGroup, ...] = ()
    attribute_to_field: tuple[AttributeSideEffectRule, ...] = ()

    def attributes(self) -> tuple[str, ...]:
        """Every attribute referenced by any rule, in first-seen order."""
        found: list[str] = []
        for rule in self.field_to_attribute:
            found.extend(rule.target)
            found.extend(rule.excluded)
        for group in self.attribute_exclusion_groups:
            found.extend(group.items)
        for side_effect in self.attribute_to_field:
            found.append(side_effect.trigger)
        return _unique(found)

    def fields(self) -> tuple[str, ...]:
        """
        Every concrete field referenced by any rule, in first-seen order.

        Wildcard patterns are not fields and are left out.
        """
        found: list[str] = []
        for rule in self.field_to_attribute:
            found.extend(p for p in rule.trigger_patterns if not p.endswith(WILDCARD))
        for side_effect in self.attribute_to_field:
            found.extend(side_effect.negative_fields)
        return _unique(found)

    def is_empty(self) -> bool:
        return not (
            self.field_to_attribute or self.attribute_exclusion_groups or self.attribute_to_field
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize back to the JSON document shape."""
        return {
            "field_to_attribute": [asdict(r) for r in self.field_to_attribute],
            "attribute_exclusion_groups": [asdict(g) for g in self.attribute_exclusion_groups],
            "attribute_to_field": [asdict(r) for r in self.attribute_to_field],
        }

"""
Search-condition exclusion engine.

Decides, for every attribute and field of the search dialog, whether it can
be used, whether it is forced, and why. Four passes run in a fixed order:

1. field -> attribute: filled-in fields make attributes required (or rule
   them out)
2. attribute exclusion: an active member of an exclusion group disables the
   other members
3. attribute -> field: active attributes disable fields that make no sense
   for them
4. reverse cascade: a field whose required attributes are all disabled is
   disabled too

The passes repeat until a round changes nothing or the iteration cap is hit.

INVARIANTS:
- infer() never raises; unknown identifiers get the default state
- required is monotonic: once set it is never cleared within a call
- enabled only ever goes from True to False within a call
- identical inputs produce identical results and traces
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, replace
from types import MappingProxyType

from filterforge.config import settings
from filterforge.exclusion.reasons import (
    ReasonKind,
    attribute_label,
    format_disabled_reason,
    input_sources,
    join_labels,
)
from filterforge.models.condition import ConditionState, MatchMode
from filterforge.models.result import (
    AttributeState,
    Conflict,
    ConflictType,
    FieldState,
    InferenceResult,
    TraceAction,
    TraceEntry,
)
from filterforge.models.rules import (
    WILDCARD,
    ExclusionGroup,
    FieldRequirementRule,
    RuleSet,
    matches_pattern,
)

logger = logging.getLogger(__name__)


@dataclass
class _Run:
    """Mutable working state of a single infer() call. Never shared."""

    state: ConditionState
    rules: RuleSet
    attributes: dict[str, AttributeState]
    fields: dict[str, FieldState]
    trace: list[TraceEntry] | None
    step: int = 0

    def record(self, action: TraceAction, source: str, target: str, reason: str) -> None:
        if self.trace is not None:
            self.trace.append(TraceEntry(self.step, action, source, target, reason))

    def attr(self, attr: str) -> AttributeState:
        # Rule data may name attributes the initial scan never saw
        if attr not in self.attributes:
            self.attributes[attr] = AttributeState()
        return self.attributes[attr]

    def field(self, field_name: str) -> FieldState:
        if field_name not in self.fields:
            self.fields[field_name] = FieldState(has_input=self.state.has_input(field_name))
        return self.fields[field_name]

    def disable_attribute(self, attr: str, kind: ReasonKind, sources: list[str]) -> bool:
        current = self.attr(attr)
        if not current.enabled:
            return False
        self.attributes[attr] = replace(
            current,
            enabled=False,
            selected=current.selected and current.required,
            disabled_reason=format_disabled_reason(kind, sources),
            disabled_by=tuple(sources),
        )
        return True

    def disable_field(self, field_name: str, reason: str, sources: list[str]) -> bool:
        current = self.field(field_name)
        if not current.enabled:
            return False
        self.fields[field_name] = replace(
            current,
            enabled=False,
            disabled_reason=reason,
            disabled_by=tuple(sources),
        )
        return True

    def is_active(self, attr: str) -> bool:
        current = self.attr(attr)
        return current.enabled and (current.selected or current.required)


def _initial_run(state: ConditionState, rules: RuleSet, trace: bool) -> _Run:
    # Rule order first, then unknown identifiers sorted, so iteration is stable
    attributes: dict[str, AttributeState] = {}
    for attr in rules.attributes():
        attributes[attr] = AttributeState()
    for attr in sorted(a for a in state.selected_attributes if a not in attributes):
        attributes[attr] = AttributeState()
    for attr in state.selected_attributes:
        attributes[attr] = AttributeState(selected=True)

    fields: dict[str, FieldState] = {}
    for field_name in rules.fields():
        fields[field_name] = FieldState(has_input=state.has_input(field_name))
    for field_name in sorted(f for f in state.field_inputs if f not in fields):
        fields[field_name] = FieldState(has_input=state.has_input(field_name))

    return _Run(
        state=state,
        rules=rules,
        attributes=attributes,
        fields=fields,
        trace=[] if trace else None,
    )


# =============================================================================
# PASS 1: FIELD -> ATTRIBUTE
# =============================================================================


def _matching_inputs(rule: FieldRequirementRule, field_inputs: Mapping[str, bool]) -> list[str]:
    """Input fields a rule fires on, in pattern order, wildcard hits sorted."""
    matching: list[str] = []
    for pattern in rule.trigger_patterns:
        if pattern.endswith(WILDCARD):
            matching.extend(sorted(name for name in field_inputs if matches_pattern(pattern, name)))
        elif pattern in field_inputs:
            matching.append(pattern)
    return list(dict.fromkeys(matching))


def _apply_field_to_attribute(run: _Run) -> bool:
    changed = False

    for rule in run.rules.field_to_attribute:
        matching = _matching_inputs(rule, run.state.field_inputs)
        triggered_by = input_sources(matching, run.state.field_inputs)
        if not triggered_by:
            continue
        source = ",".join(triggered_by)

        for attr in rule.target:
            current = run.attr(attr)
            if current.required:
                continue
            # A disabled target still becomes required; conflict detection reports it
            run.attributes[attr] = replace(current, required=True, selected=True)
            changed = True
            suffix = " (but unavailable)" if not current.enabled else ""
            run.record(
                TraceAction.FIELD_TO_ATTRIBUTE,
                source,
                attr,
                f"{rule.title}: required{suffix}",
            )

        for attr in rule.excluded:
            if run.disable_attribute(attr, ReasonKind.FIELD_INPUT, triggered_by):
                changed = True
                run.record(TraceAction.FIELD_TO_ATTRIBUTE, source, attr, f"{rule.title}: excluded")

    return changed


# =============================================================================
# PASS 2: ATTRIBUTE EXCLUSION
# =============================================================================


def _exclusivity_applies(group: ExclusionGroup, mode: MatchMode, any_required: bool) -> bool:
    if not group.mode_sensitive:
        return True
    if mode == MatchMode.AND:
        return True
    # OR lets directly selected members coexist, but not a hard requirement
    return any_required


def _apply_attribute_exclusion(run: _Run) -> bool:
    changed = False

    for group in run.rules.attribute_exclusion_groups:
        active = [attr for attr in group.items if run.is_active(attr)]
        if not active:
            continue

        required = [attr for attr in active if run.attributes[attr].required]
        if not _exclusivity_applies(group, run.state.mode, bool(required)):
            continue

        # Required members win; two of them stay enabled and surface as a contradiction
        kept = required or active[:1]
        kept_text = join_labels(kept)

        for attr in group.items:
            if attr in kept:
                continue
            if run.disable_attribute(attr, ReasonKind.EXCLUSION, kept):
                changed = True
                run.record(
                    TraceAction.ATTRIBUTE_EXCLUSION,
                    kept_text,
                    attr,
                    f"exclusive within {group.title}",
                )

    return changed


# =============================================================================
# PASS 3: ATTRIBUTE -> FIELD
# =============================================================================


def _apply_attribute_to_field(run: _Run) -> bool:
    changed = False

    for rule in run.rules.attribute_to_field:
        if not run.is_active(rule.trigger):
            continue
        reason = format_disabled_reason(ReasonKind.SIDE_EFFECT, rule.trigger)
        for field_name in rule.negative_fields:
            if run.disable_field(field_name, reason, [rule.trigger]):
                changed = True
                run.record(
                    TraceAction.ATTRIBUTE_TO_FIELD,
                    rule.trigger,
                    field_name,
                    f"{rule.title}: disabled",
                )

    return changed


# =============================================================================
# PASS 4: REVERSE CASCADE
# =============================================================================


def _apply_field_disable_cascade(run: _Run) -> bool:
    changed = False

    for rule in run.rules.field_to_attribute:
        if not rule.target:
            continue
        if any(run.attr(attr).enabled for attr in rule.target):
            continue

        # Reuse the first target's reason so the field explains the root cause
        first = run.attributes[rule.target[0]]
        reason = first.disabled_reason or format_disabled_reason(
            ReasonKind.UNAVAILABLE, list(rule.target)
        )
        matching = [name for name in list(run.fields) if rule.matches(name)]
        for field_name in matching:
            if run.disable_field(field_name, reason, list(rule.target)):
                changed = True
                run.record(
                    TraceAction.FIELD_DISABLE_CASCADE,
                    ",".join(rule.target),
                    field_name,
                    f"{rule.title}: every required attribute is unavailable",
                )

    return changed


# =============================================================================
# CONFLICT DETECTION
# =============================================================================


def _group_contradictions(run: _Run) -> list[Conflict]:
    """
    Required members colliding inside an exclusive group.

    Considers members that are required or were chosen directly by the user,
    whether or not they ended up enabled. A displaced selection is a
    contradiction only where the group is exclusive without any requirement;
    under OR in a mode-sensitive group it is a warning.
    """
    conflicts: list[Conflict] = []

    for group in run.rules.attribute_exclusion_groups:
        engaged = [
            attr
            for attr in group.items
            if run.attr(attr).required or attr in run.state.selected_attributes
        ]
        if len(engaged) < 2:
            continue
        # A required member makes every group exclusive, whatever the mode
        required = [attr for attr in engaged if run.attributes[attr].required]
        if not required:
            continue

        required_text = join_labels([attribute_label(r) for r in required])

        if len(required) > 1:
            for attr in required:
                conflicts.append(
                    Conflict(
                        type=ConflictType.CONTRADICTION,
                        subject=attr,
                        reason=f"{required_text} are required together but {group.title} "
                        "allows only one",
                        sources=tuple(required),
                    )
                )

        # Under OR a mode-sensitive group still matches the required member,
        # so the dropped selection is only worth a warning
        displaced_type = (
            ConflictType.CONTRADICTION
            if _exclusivity_applies(group, run.state.mode, any_required=False)
            else ConflictType.WARNING
        )
        for attr in engaged:
            if attr in required:
                continue
            verb = "is" if len(required) == 1 else "are"
            conflicts.append(
                Conflict(
                    type=displaced_type,
                    subject=attr,
                    reason=f"{attribute_label(attr)} was selected but {required_text} {verb} "
                    f"required within {group.title}",
                    sources=tuple(required),
                )
            )

    return conflicts


def _detect_conflicts(run: _Run) -> tuple[Conflict, ...]:
    conflicts: list[Conflict] = []

    for attr, current in run.attributes.items():
        if current.required and not current.enabled:
            conflicts.append(
                Conflict(
                    type=ConflictType.CONTRADICTION,
                    subject=attr,
                    reason=(
                        f"{attribute_label(attr)} is required but cannot be selected"
                        + (f": {current.disabled_reason}" if current.disabled_reason else "")
                    ),
                    sources=current.disabled_by,
                )
            )

    conflicts.extend(_group_contradictions(run))

    for field_name, current in run.fields.items():
        if current.has_input and not current.enabled:
            conflicts.append(
                Conflict(
                    type=ConflictType.WARNING,
                    subject=field_name,
                    reason=(
                        f"{field_name} has a value but is disabled"
                        + (f": {current.disabled_reason}" if current.disabled_reason else "")
                    ),
                    sources=current.disabled_by,
                )
            )

    return tuple(dict.fromkeys(conflicts))


# =============================================================================
# ENTRY POINT
# =============================================================================

_PASSES = (
    _apply_field_to_attribute,
    _apply_attribute_exclusion,
    _apply_attribute_to_field,
    _apply_field_disable_cascade,
)


def infer(
    state: ConditionState,
    rules: RuleSet,
    trace: bool = False,
    max_iterations: int | None = None,
) -> InferenceResult:
    """
    Run exclusion inference for one condition state.

    Args:
        state: What the user has selected and filled in
        rules: Rule set to apply
        trace: Record every rule firing in result.trace
        max_iterations: Round cap; defaults to settings.inference_max_iterations

    Returns:
        InferenceResult with a state for every known attribute and field.
        result.converged is False when the cap stopped inference early;
        callers should log that as a rule-data problem.
    """
    cap = max_iterations if max_iterations is not None else settings.inference_max_iterations
    run = _initial_run(state, rules, trace)

    changed = True
    while changed and run.step < cap:
        run.step += 1
        changed = False
        for apply_pass in _PASSES:
            # Every pass runs each round, even after an earlier pass changed something
            if apply_pass(run):
                changed = True

    converged = not changed
    if not converged:
        logger.debug(
            "EXCLUSION_INFERENCE_CAPPED",
            extra={"iterations": run.step, "max_iterations": cap},
        )

    return InferenceResult(
        attribute_states=MappingProxyType(run.attributes),
        field_states=MappingProxyType(run.fields),
        conflicts=_detect_conflicts(run),
        trace=tuple(run.trace) if run.trace is not None else None,
        iterations=run.step,
        converged=converged,
    )

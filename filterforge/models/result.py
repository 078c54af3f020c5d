"""
Inference result model.

An InferenceResult is a read-only snapshot rebuilt on every engine call.
Callers read it to grey out controls, mark required ones, and show conflict
banners. disabled_reason strings are for display only; nothing reads them
back as logic.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any


class ConflictType(str, Enum):
    """Severity of a detected conflict."""

    # A required attribute cannot be satisfied
    CONTRADICTION = "contradiction"
    # A filled-in field no longer means anything
    WARNING = "warning"


class TraceAction(str, Enum):
    """Rule pass that produced a trace entry."""

    FIELD_TO_ATTRIBUTE = "field-to-attribute"
    ATTRIBUTE_EXCLUSION = "attribute-exclusion"
    ATTRIBUTE_TO_FIELD = "attribute-to-field"
    FIELD_DISABLE_CASCADE = "field-disable-cascade"


@dataclass(frozen=True, slots=True)
class AttributeState:
    """
    State of one selectable attribute.

    Attributes:
        enabled: Whether the control can be chosen
        selected: Whether it counts as chosen (directly or because it is required)
        required: Whether a field input forces it
        disabled_reason: Display text explaining why it is disabled
        disabled_by: Identifiers that caused the disabling
    """

    enabled: bool = True
    selected: bool = False
    required: bool = False
    disabled_reason: str | None = None
    disabled_by: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class FieldState:
    """State of one free-form input field."""

    enabled: bool = True
    has_input: bool = False
    disabled_reason: str | None = None
    disabled_by: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Conflict:
    """A contradiction or warning found after inference settled."""

    type: ConflictType
    subject: str
    reason: str
    sources: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class TraceEntry:
    """One rule firing, recorded only when tracing is requested."""

    step: int
    action: TraceAction
    source: str
    target: str
    reason: str


DEFAULT_ATTRIBUTE_STATE = AttributeState()
DEFAULT_FIELD_STATE = FieldState()


@dataclass(frozen=True, slots=True)
class InferenceResult:
    """
    Outcome of one inference run.

    Attributes:
        attribute_states: Attribute -> state (read-only mapping)
        field_states: Field -> state (read-only mapping)
        conflicts: Contradictions and warnings, in deterministic order
        trace: Rule firings in application order, or None when not requested
        iterations: Rule rounds executed, including the final quiet round
        converged: False if the iteration cap stopped the run early
    """

    attribute_states: Mapping[str, AttributeState]
    field_states: Mapping[str, FieldState]
    conflicts: tuple[Conflict, ...] = ()
    trace: tuple[TraceEntry, ...] | None = None
    iterations: int = 0
    converged: bool = True

    def attribute(self, attr: str) -> AttributeState:
        """State of an attribute; unknown attributes are enabled and free."""
        return self.attribute_states.get(attr, DEFAULT_ATTRIBUTE_STATE)

    def field(self, field_name: str) -> FieldState:
        """State of a field; unknown fields are enabled."""
        return self.field_states.get(field_name, DEFAULT_FIELD_STATE)

    @property
    def contradictions(self) -> list[Conflict]:
        return [c for c in self.conflicts if c.type == ConflictType.CONTRADICTION]

    @property
    def warnings(self) -> list[Conflict]:
        return [c for c in self.conflicts if c.type == ConflictType.WARNING]

    @property
    def has_contradiction(self) -> bool:
        return any(c.type == ConflictType.CONTRADICTION for c in self.conflicts)

    def disabled_attributes(self) -> list[str]:
        return [attr for attr, state in self.attribute_states.items() if not state.enabled]

    def disabled_fields(self) -> list[str]:
        return [name for name, state in self.field_states.items() if not state.enabled]

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary for API responses."""
        return {
            "attribute_states": {
                attr: {
                    "enabled": state.enabled,
                    "selected": state.selected,
                    "required": state.required,
                    "disabled_reason": state.disabled_reason,
                    "disabled_by": list(state.disabled_by),
                }
                for attr, state in self.attribute_states.items()
            },
            "field_states": {
                name: {
                    "enabled": state.enabled,
                    "has_input": state.has_input,
                    "disabled_reason": state.disabled_reason,
                    "disabled_by": list(state.disabled_by),
                }
                for name, state in self.field_states.items()
            },
            "conflicts": [
                {
                    "type": c.type.value,
                    "subject": c.subject,
                    "reason": c.reason,
                    "sources": list(c.sources),
                }
                for c in self.conflicts
            ],
            "trace": (
                None
                if self.trace is None
                else [
                    {
                        "step": t.step,
                        "action": t.action.value,
                        "source": t.source,
                        "target": t.target,
                        "reason": t.reason,
                    }
                    for t in self.trace
                ]
            ),
            "iterations": self.iterations,
            "converged": self.converged,
        }

from filterforge.models.condition import ConditionState, MatchMode
from filterforge.models.filters import (
    MonsterTypeState,
    MonsterTypeTerm,
    ReleaseDateRange,
    SearchFilters,
    StatRange,
)
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
    AttributeSideEffectRule,
    ExclusionGroup,
    FieldRequirementRule,
    RuleSet,
    matches_pattern,
)

__all__ = [
    "AttributeSideEffectRule",
    "AttributeState",
    "ConditionState",
    "Conflict",
    "ConflictType",
    "ExclusionGroup",
    "FieldRequirementRule",
    "FieldState",
    "InferenceResult",
    "MatchMode",
    "MonsterTypeState",
    "MonsterTypeTerm",
    "ReleaseDateRange",
    "RuleSet",
    "SearchFilters",
    "StatRange",
    "TraceAction",
    "TraceEntry",
    "WILDCARD",
    "matches_pattern",
]

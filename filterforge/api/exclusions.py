"""
Exclusion inference endpoints.

The search dialog posts its current filters after every edit and re-renders
disabled/required controls and conflict banners from the response.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from filterforge.exclusion import get_rules, infer, to_condition_state
from filterforge.models.condition import ConditionState, MatchMode
from filterforge.models.filters import SearchFilters
from filterforge.models.rules import RuleSet

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/exclusions", tags=["exclusions"])

RulesDep = Annotated[RuleSet, Depends(get_rules)]


class AttributeStateResponse(BaseModel):
    enabled: bool
    selected: bool
    required: bool
    disabled_reason: str | None = None
    disabled_by: list[str] = Field(default_factory=list)


class FieldStateResponse(BaseModel):
    enabled: bool
    has_input: bool
    disabled_reason: str | None = None
    disabled_by: list[str] = Field(default_factory=list)


class ConflictResponse(BaseModel):
    type: str
    subject: str
    reason: str
    sources: list[str] = Field(default_factory=list)


class TraceEntryResponse(BaseModel):
    step: int
    action: str
    source: str
    target: str
    reason: str


class InferenceResponse(BaseModel):
    """Control states for the whole dialog."""

    attribute_states: dict[str, AttributeStateResponse]
    field_states: dict[str, FieldStateResponse]
    conflicts: list[ConflictResponse] = Field(default_factory=list)
    trace: list[TraceEntryResponse] | None = None
    iterations: int
    converged: bool


class ConditionStateRequest(BaseModel):
    """Condition state for callers that already flattened their filters."""

    mode: MatchMode = MatchMode.AND
    selected_attributes: list[str] = Field(default_factory=list)
    field_inputs: dict[str, bool] = Field(default_factory=dict)


class FieldRequirementRuleResponse(BaseModel):
    title: str
    trigger_patterns: list[str]
    target: list[str] = Field(default_factory=list)
    excluded: list[str] = Field(default_factory=list)


class ExclusionGroupResponse(BaseModel):
    title: str
    items: list[str]
    mode_sensitive: bool = False


class AttributeSideEffectRuleResponse(BaseModel):
    title: str
    trigger: str
    negative_fields: list[str]


class RuleSetResponse(BaseModel):
    field_to_attribute: list[FieldRequirementRuleResponse]
    attribute_exclusion_groups: list[ExclusionGroupResponse]
    attribute_to_field: list[AttributeSideEffectRuleResponse]


def _run_inference(state: ConditionState, rules: RuleSet, trace: bool) -> InferenceResponse:
    result = infer(state, rules, trace=trace)
    if not result.converged:
        logger.warning(
            "EXCLUSION_INFERENCE_NOT_CONVERGED",
            extra={
                "iterations": result.iterations,
                "selected_attributes": sorted(state.selected_attributes),
                "input_fields": state.input_fields(),
            },
        )
    return InferenceResponse.model_validate(result.to_dict())


@router.get("/rules", response_model=RuleSetResponse)
async def get_exclusion_rules(rules: RulesDep) -> RuleSetResponse:
    """Return the active exclusion rules."""
    return RuleSetResponse.model_validate(rules.to_dict())


@router.post("/infer", response_model=InferenceResponse)
async def infer_from_filters(
    filters: SearchFilters,
    rules: RulesDep,
    trace: bool = False,
) -> InferenceResponse:
    """
    Infer control states from the dialog's filter object.

    Contradictions and warnings come back as data in `conflicts`; the
    dialog decides whether to block the search or only inform.
    """
    return _run_inference(to_condition_state(filters), rules, trace)


@router.post("/infer/state", response_model=InferenceResponse)
async def infer_from_state(
    request: ConditionStateRequest,
    rules: RulesDep,
    trace: bool = False,
) -> InferenceResponse:
    """Infer control states from an explicit condition state."""
    state = ConditionState(
        mode=request.mode,
        selected_attributes=frozenset(request.selected_attributes),
        field_inputs=request.field_inputs,
    )
    return _run_inference(state, rules, trace)

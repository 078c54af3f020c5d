"""
Search filter payload sent by the filter dialog.

Mirrors the dialog's filter object. The payload is camelCase on the wire;
every property is optional and defaults to "no input".
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from filterforge.models.condition import MatchMode


class MonsterTypeState(str, Enum):
    """Whether a monster sub-type term includes or excludes the sub-type."""

    NORMAL = "normal"
    NOT = "not"


class MonsterTypeTerm(BaseModel):
    """A monster sub-type chip in the dialog."""

    type: str
    state: MonsterTypeState = MonsterTypeState.NORMAL


class StatRange(BaseModel):
    """ATK or DEF condition."""

    exact: bool = False
    unknown: bool = False
    min: int | None = None
    max: int | None = None

    def has_input(self) -> bool:
        return self.exact or self.unknown or self.min is not None or self.max is not None


class ReleaseDateRange(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: str | None = Field(default=None, alias="from")
    to: str | None = None


class SearchFilters(BaseModel):
    """
    Filter object as edited in the search dialog.

    Discrete choices (card type, attributes, races, spell/trap types, monster
    sub-types) become attributes; list and range inputs become fields.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    card_type: str | None = None
    attributes: list[str] = Field(default_factory=list)
    spell_types: list[str] = Field(default_factory=list)
    trap_types: list[str] = Field(default_factory=list)
    races: list[str] = Field(default_factory=list)
    monster_types: list[MonsterTypeTerm] = Field(default_factory=list)
    monster_type_match_mode: MatchMode = MatchMode.AND
    level_type: str = "level"
    level_values: list[int] = Field(default_factory=list)
    link_values: list[int] = Field(default_factory=list)
    scale_values: list[int] = Field(default_factory=list)
    link_markers: list[int] = Field(default_factory=list)
    link_marker_match_mode: MatchMode = MatchMode.OR
    atk: StatRange = Field(default_factory=StatRange)
    def_: StatRange = Field(default_factory=StatRange, alias="def")
    release_date: ReleaseDateRange = Field(default_factory=ReleaseDateRange)

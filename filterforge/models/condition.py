from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType


class MatchMode(str, Enum):
    """How selected monster sub-types combine in a search."""

    AND = "and"
    OR = "or"


@dataclass(frozen=True)
class ConditionState:
    """
    Snapshot of what the user has put into the search form.

    Attributes:
        mode: Combination mode for the mode-sensitive exclusion groups
        selected_attributes: Attributes the user chose directly
        field_inputs: Field name -> whether the field holds a value

    Identifiers are opaque; ones no rule mentions are still tracked.
    """

    mode: MatchMode = MatchMode.AND
    selected_attributes: frozenset[str] = frozenset()
    field_inputs: Mapping[str, bool] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "mode", MatchMode(self.mode))
        object.__setattr__(self, "selected_attributes", frozenset(self.selected_attributes))
        object.__setattr__(
            self,
            "field_inputs",
            MappingProxyType({name: bool(value) for name, value in self.field_inputs.items()}),
        )

    @classmethod
    def of(
        cls,
        mode: MatchMode | str = MatchMode.AND,
        selected: Iterable[str] = (),
        inputs: Iterable[str] = (),
    ) -> "ConditionState":
        """Shorthand: list the fields that have input instead of passing a mapping."""
        return cls(
            mode=MatchMode(mode),
            selected_attributes=frozenset(selected),
            field_inputs={name: True for name in inputs},
        )

    def has_input(self, field_name: str) -> bool:
        return self.field_inputs.get(field_name, False)

    def input_fields(self) -> list[str]:
        """Fields that currently hold a value, in insertion order."""
        return [name for name, value in self.field_inputs.items() if value]

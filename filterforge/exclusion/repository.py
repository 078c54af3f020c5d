"""
Exclusion rule repository.

Loads the three rule collections from a JSON document:

    {
      "field_to_attribute": [...],
      "attribute_exclusion_groups": [...],
      "attribute_to_field": [...]
    }

Bad data never stops inference. A collection that is not a list loads as
empty, and an entry that fails validation is skipped. Both are logged.
"""

import json
import logging
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from filterforge.config import settings
from filterforge.models.rules import (
    AttributeSideEffectRule,
    ExclusionGroup,
    FieldRequirementRule,
    RuleSet,
)

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / "data"
DEFAULT_RULES_PATH = DATA_DIR / "exclusion_rules.json"

_ADAPTERS: dict[str, TypeAdapter[Any]] = {
    "field_to_attribute": TypeAdapter(FieldRequirementRule),
    "attribute_exclusion_groups": TypeAdapter(ExclusionGroup),
    "attribute_to_field": TypeAdapter(AttributeSideEffectRule),
}


def _parse_collection(document: Mapping[str, Any], key: str) -> tuple[Any, ...]:
    raw = document.get(key, [])
    if not isinstance(raw, list):
        logger.warning(
            "EXCLUSION_RULES_COLLECTION_IGNORED",
            extra={"collection": key, "found_type": type(raw).__name__},
        )
        return ()

    adapter = _ADAPTERS[key]
    parsed = []
    for index, entry in enumerate(raw):
        try:
            parsed.append(adapter.validate_python(entry))
        except ValidationError as e:
            logger.warning(
                "EXCLUSION_RULE_SKIPPED",
                extra={
                    "collection": key,
                    "index": index,
                    "errors": e.error_count(),
                },
            )
    return tuple(parsed)


def parse_rules(document: Any) -> RuleSet:
    """
    Build a RuleSet from an already-decoded rule document.

    Args:
        document: Decoded JSON; anything but a mapping yields an empty RuleSet

    Returns:
        RuleSet with every valid entry, in declaration order.
    """
    if not isinstance(document, Mapping):
        logger.warning(
            "EXCLUSION_RULES_DOCUMENT_IGNORED",
            extra={"found_type": type(document).__name__},
        )
        return RuleSet()

    return RuleSet(
        field_to_attribute=_parse_collection(document, "field_to_attribute"),
        attribute_exclusion_groups=_parse_collection(document, "attribute_exclusion_groups"),
        attribute_to_field=_parse_collection(document, "attribute_to_field"),
    )


def load_rules(path: Path | None = None) -> RuleSet:
    """
    Load exclusion rules from a JSON file.

    Args:
        path: Rule document. Defaults to the packaged exclusion_rules.json

    Returns:
        Immutable RuleSet.

    Raises:
        FileNotFoundError: If the rule file doesn't exist
    """
    if path is None:
        path = DEFAULT_RULES_PATH

    if not path.exists():
        raise FileNotFoundError(f"Exclusion rules not found at {path}.")

    with open(path, encoding="utf-8") as f:
        document = json.load(f)

    rules = parse_rules(document)
    logger.info(
        "EXCLUSION_RULES_LOADED",
        extra={
            "path": str(path),
            "field_to_attribute": len(rules.field_to_attribute),
            "attribute_exclusion_groups": len(rules.attribute_exclusion_groups),
            "attribute_to_field": len(rules.attribute_to_field),
        },
    )
    return rules


@lru_cache(maxsize=1)
def get_rules() -> RuleSet:
    """
    Get the configured rule set.

    Cached after first load; the RuleSet is immutable so every caller can
    share it.
    """
    return load_rules(settings.exclusion_rules_path)

"""
Audit exclusion rule data.

Runs inference for every single-control state (one field filled in, or one
attribute selected, under both match modes) and reports rule-data problems:

- states where inference hit the iteration cap (cyclic or runaway rules)
- states that contradict themselves with a single control engaged
- fields disabled by attribute rules that no field rule ever mentions

Run before shipping an edited rule file:

    python -m filterforge.jobs.check_rules --rules path/to/rules.json
"""

import argparse
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path

from filterforge.exclusion import infer, load_rules
from filterforge.models.condition import ConditionState, MatchMode
from filterforge.models.rules import WILDCARD, RuleSet

logger = logging.getLogger(__name__)


@dataclass
class RuleAudit:
    """Findings from one audit run."""

    states_checked: int = 0
    non_converged: list[str] = field(default_factory=list)
    self_contradictions: list[str] = field(default_factory=list)
    unreferenced_fields: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.non_converged and not self.self_contradictions


def _sample_fields(rules: RuleSet) -> list[str]:
    """Concrete fields plus one representative per wildcard prefix."""
    samples = list(rules.fields())
    for rule in rules.field_to_attribute:
        for pattern in rule.trigger_patterns:
            if pattern.endswith(WILDCARD):
                prefix = pattern[: -len(WILDCARD)]
                if not any(name.startswith(prefix) for name in samples):
                    samples.append(prefix)
    return samples


def _single_control_states(rules: RuleSet) -> list[tuple[str, ConditionState]]:
    states: list[tuple[str, ConditionState]] = []
    for mode in MatchMode:
        for field_name in _sample_fields(rules):
            states.append(
                (f"{mode.value}: input {field_name}", ConditionState.of(mode, inputs=[field_name]))
            )
        for attr in rules.attributes():
            states.append(
                (f"{mode.value}: select {attr}", ConditionState.of(mode, selected=[attr]))
            )
    return states


def audit_rules(rules: RuleSet, max_iterations: int | None = None) -> RuleAudit:
    """
    Audit a rule set.

    Args:
        rules: Rule set to check
        max_iterations: Round cap passed through to infer()

    Returns:
        RuleAudit with every finding.
    """
    audit = RuleAudit()

    for label, state in _single_control_states(rules):
        result = infer(state, rules, max_iterations=max_iterations)
        audit.states_checked += 1

        if not result.converged:
            audit.non_converged.append(label)
            logger.warning(
                "EXCLUSION_INFERENCE_NOT_CONVERGED",
                extra={"state": label, "iterations": result.iterations},
            )
        if result.has_contradiction:
            audit.self_contradictions.append(label)
            logger.warning(
                "EXCLUSION_RULES_SELF_CONTRADICTION",
                extra={
                    "state": label,
                    "conflicts": [c.reason for c in result.contradictions],
                },
            )

    for side_effect in rules.attribute_to_field:
        for field_name in side_effect.negative_fields:
            referenced = any(rule.matches(field_name) for rule in rules.field_to_attribute)
            if not referenced and field_name not in audit.unreferenced_fields:
                audit.unreferenced_fields.append(field_name)

    return audit


def run_audit(path: Path | None = None) -> int:
    """Load rules, audit them, and return the process exit code."""
    rules = load_rules(path)
    audit = audit_rules(rules)

    logger.info(
        "Checked %d single-control states: %d non-converging, %d self-contradicting",
        audit.states_checked,
        len(audit.non_converged),
        len(audit.self_contradictions),
    )
    for field_name in audit.unreferenced_fields:
        logger.info("Field %s is only ever disabled, never required by a field rule", field_name)

    return 0 if audit.ok else 1


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Audit search exclusion rules.")
    parser.add_argument(
        "--rules",
        type=Path,
        default=None,
        help="Rule document to audit (default: packaged rules)",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    sys.exit(run_audit(args.rules))


if __name__ == "__main__":
    main()

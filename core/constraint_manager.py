from typing import Callable, Iterable

from core.hard_rules import RuleContext, ValidationResult
from core.models import ScheduledClass
from core.state import ScheduleLedger


class ConstraintManager:
    def __init__(self, context: RuleContext):
        self.context = context
        self.rules: list[Callable] = []

    def add_rule(self, rule_func: Callable, condition: bool = True):
        """Register a rule with optional enablement condition."""
        if condition:
            self.rules.append(rule_func)

    def evaluate(
        self,
        ledger: ScheduleLedger,
        proposed: ScheduledClass,
        exclude_ids: Iterable[str] = (),
    ) -> ValidationResult:
        """Apply all registered rules in order and collect every violation."""
        excluded = list(exclude_ids)
        if excluded:
            ledger = ledger.without(excluded)

        result = ValidationResult()
        for rule in self.rules:
            violation = rule(ledger, proposed, self.context)
            if violation is not None:
                result.add_violation(violation)
        return result

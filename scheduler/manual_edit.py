from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Union
import logging

from core.hard_rules import ConstraintType, ConstraintViolation, RuleContext
from core.models import ScheduledClass, TrainerRoster
from core.state import ScheduleLedger
from scheduler.setup import build_validator
from utils.constants import MAX_WEEKLY_HOURS

logger = logging.getLogger(__name__)

VALID = "valid"
WARNING = "warning"
INVALID = "invalid"


@dataclass
class EditValidation:
    status: str
    """'valid', 'warning' (commit after confirmation) or 'invalid'."""
    message: str
    can_override: bool = False
    """True only when exceeding the weekly hour cap is the sole problem."""
    violations: List[ConstraintViolation] = field(default_factory=list)


def validate_edit(
    ledger: Union[ScheduleLedger, Iterable[ScheduledClass]],
    proposed: ScheduledClass,
    roster: Optional[TrainerRoster] = None,
    standard_cap: float = MAX_WEEKLY_HOURS,
) -> EditValidation:
    """
    Check one proposed class against a live schedule without changing it.

    When the proposal's id is already scheduled, it is validated against the
    schedule without that class, so editing (or re-checking) a class does not
    collide with itself.
    """
    if not isinstance(ledger, ScheduleLedger):
        ledger = ScheduleLedger(ledger)
    validator = build_validator(RuleContext(roster=roster or TrainerRoster(), standard_cap=standard_cap))
    exclude = [proposed.id] if proposed.id in ledger else []
    result = validator.evaluate(ledger, proposed, exclude_ids=exclude)

    if result.has_hard_violations:
        hard = result.hard_violations
        overridable = all(v.constraint_type == ConstraintType.WEEKLY_HOURS for v in hard)
        logger.debug(f"Edit {proposed.id} refused: {[str(v) for v in hard]}")
        return EditValidation(
            status=INVALID,
            message="; ".join(v.message for v in hard),
            can_override=overridable,
            violations=result.violations,
        )
    if result.soft_violations:
        return EditValidation(
            status=WARNING,
            message="; ".join(v.message for v in result.soft_violations),
            violations=result.violations,
        )
    return EditValidation(status=VALID, message="Class can be scheduled")

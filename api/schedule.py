from schemas.schedule.synthesize import (
    FillGapsRequest,
    SynthesizeRequest,
    ValidateEditRequest,
)
from fastapi import APIRouter, HTTPException
from scheduler import fill_gaps, run_synthesis, validate_edit
from core.models import TrainerRoster
from exceptions.custom_errors import *
import traceback
from docs.schedule.synthesize import (
    fill_gaps_description,
    synthesize_description,
    validate_edit_description,
)
from utils.helpers.schedule_roster import (
    class_to_dict,
    to_options,
    to_performance_records,
    to_roster_entries,
    to_scheduled_class,
    to_scheduled_classes,
)

router = APIRouter(prefix="/schedule", tags=["Schedule"])


# synthesize weekly schedule
@router.post(
    "/synthesize",
    response_model=dict,
    description=synthesize_description,
    summary="Synthesize Schedule",
)
def synthesize_schedule(request: SynthesizeRequest):
    try:
        result = run_synthesis(
            to_performance_records(request.records),
            to_roster_entries(request.teachers),
            to_options(request.options),
            current_schedule=to_scheduled_classes(request.currentSchedule),
        )
        return {
            "schedule": [class_to_dict(c) for c in result.classes],
            "summary": result.summary.to_dict(orient="records"),
            "stats": result.stats,
        }

    except tuple(CUSTOM_ERRORS) as e:
        raise HTTPException(status_code=CUSTOM_ERRORS[type(e)], detail=str(e))
    except Exception as e:
        tb = traceback.format_exc()
        raise HTTPException(status_code=500, detail=f"{str(e)}\n\nTraceback:\n{tb}")


# fill gaps of an existing schedule
@router.post(
    "/fill-gaps",
    response_model=dict,
    description=fill_gaps_description,
    summary="Fill Schedule Gaps",
)
def fill_schedule_gaps(request: FillGapsRequest):
    try:
        current = to_scheduled_classes(request.schedule)
        existing_ids = {c.id for c in current}
        filled = fill_gaps(
            to_performance_records(request.records),
            current,
            to_roster_entries(request.teachers),
        )
        return {
            "schedule": [class_to_dict(c) for c in filled],
            "added": [class_to_dict(c) for c in filled if c.id not in existing_ids],
        }

    except tuple(CUSTOM_ERRORS) as e:
        raise HTTPException(status_code=CUSTOM_ERRORS[type(e)], detail=str(e))
    except Exception as e:
        tb = traceback.format_exc()
        raise HTTPException(status_code=500, detail=f"{str(e)}\n\nTraceback:\n{tb}")


# validate a manual edit
@router.post(
    "/validate-edit",
    response_model=dict,
    description=validate_edit_description,
    summary="Validate Manual Edit",
)
def validate_manual_edit(request: ValidateEditRequest):
    try:
        roster = TrainerRoster.build(custom=to_roster_entries(request.teachers))
        result = validate_edit(
            to_scheduled_classes(request.schedule),
            to_scheduled_class(request.proposed),
            roster,
            request.targetTeacherHours,
        )
        return {
            "status": result.status,
            "message": result.message,
            "canOverride": result.can_override,
            "violations": [
                {
                    "type": v.constraint_type.value,
                    "severity": v.severity.value,
                    "message": v.message,
                }
                for v in result.violations
            ],
        }

    except tuple(CUSTOM_ERRORS) as e:
        raise HTTPException(status_code=CUSTOM_ERRORS[type(e)], detail=str(e))
    except Exception as e:
        tb = traceback.format_exc()
        raise HTTPException(status_code=500, detail=f"{str(e)}\n\nTraceback:\n{tb}")

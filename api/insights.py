from schemas.insights.requests import SuggestionsRequest, TopClassesRequest
from fastapi import APIRouter, HTTPException
from core.history import HistoricalPerformanceIndex, records_to_frame
from core.state import ScheduleLedger
from scheduler.setup import resolve_roster
from exceptions.custom_errors import *
import traceback
from docs.insights.performance import suggestions_description, top_classes_description
from utils.helpers.insights import suggest_optimizations, teacher_specialties, top_performing_classes
from utils.helpers.schedule_roster import (
    class_to_dict,
    to_performance_records,
    to_roster_entries,
    to_scheduled_classes,
)

router = APIRouter(prefix="/insights", tags=["Insights"])


def _index(records, teachers):
    frame = records_to_frame(to_performance_records(records))
    roster = resolve_roster(frame, to_roster_entries(teachers))
    return HistoricalPerformanceIndex(frame, roster), roster


# top performing classes
@router.post(
    "/top-classes",
    response_model=dict,
    description=top_classes_description,
    summary="Top Performing Classes",
)
def top_classes(request: TopClassesRequest):
    try:
        index, _ = _index(request.records, request.teachers)
        classes = top_performing_classes(index, request.minAvgCheckedIn, request.limit)
        response = {
            "topClasses": [
                {
                    "classFormat": c.class_format,
                    "location": c.location,
                    "day": c.day,
                    "time": c.time,
                    "teacher": c.teacher,
                    "avgParticipants": c.avg_participants,
                    "avgRevenue": c.avg_revenue,
                    "frequency": c.frequency,
                }
                for c in classes
            ]
        }
        if request.teacher:
            response["specialties"] = teacher_specialties(index, request.teacher)
        return response

    except tuple(CUSTOM_ERRORS) as e:
        raise HTTPException(status_code=CUSTOM_ERRORS[type(e)], detail=str(e))
    except Exception as e:
        tb = traceback.format_exc()
        raise HTTPException(status_code=500, detail=f"{str(e)}\n\nTraceback:\n{tb}")


# optimisation suggestions
@router.post(
    "/suggestions",
    response_model=dict,
    description=suggestions_description,
    summary="Optimisation Suggestions",
)
def suggestions(request: SuggestionsRequest):
    try:
        index, roster = _index(request.records, request.teachers)
        ledger = ScheduleLedger(to_scheduled_classes(request.schedule))
        found = suggest_optimizations(ledger, index, roster, request.targetTeacherHours)
        return {
            "suggestions": [
                {
                    "type": s.type,
                    "originalClass": class_to_dict(s.original),
                    "suggestedClass": class_to_dict(s.suggested) if s.suggested else None,
                    "reason": s.reason,
                    "impact": s.impact,
                    "priority": s.priority,
                    "validationStatus": s.validation_status,
                    "validationMessage": s.validation_message,
                }
                for s in found
            ]
        }

    except tuple(CUSTOM_ERRORS) as e:
        raise HTTPException(status_code=CUSTOM_ERRORS[type(e)], detail=str(e))
    except Exception as e:
        tb = traceback.format_exc()
        raise HTTPException(status_code=500, detail=f"{str(e)}\n\nTraceback:\n{tb}")

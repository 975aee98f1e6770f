from pydantic import BaseModel, model_validator, Field, ConfigDict
from typing import List, Optional, Any, Literal
from utils.constants import MAX_WEEKLY_HOURS


def _join_name(values: dict, first_key: str, last_key: str) -> str:
    first = str(values.get(first_key) or "").strip()
    last = str(values.get(last_key) or "").strip()
    return f"{first} {last}".strip()


# Define data models
class PerformanceRecordIn(BaseModel):
    model_config = ConfigDict(extra="allow")

    classFormat: str
    location: str
    dayOfWeek: str
    time: str
    teacherName: str = ""
    checkedIn: float
    revenue: float = 0.0

    @model_validator(mode="before")
    @classmethod
    def map_export_keys(cls, values: Any) -> Any:
        """
        Accept the column names of the class export alongside the camelCase ones.

        `cleanedClass` maps to classFormat, `classTime` to time and `totalRevenue`
        to revenue. When no teacherName is given it is built from
        teacherFirstName and teacherLastName.
        """
        if not isinstance(values, dict):
            return values
        aliases = {
            "cleanedClass": "classFormat",
            "classTime": "time",
            "totalRevenue": "revenue",
            "teacher": "teacherName",
            "day": "dayOfWeek",
        }
        for source, target in aliases.items():
            if target not in values and source in values:
                values[target] = values.pop(source)
        if not values.get("teacherName") and (
            "teacherFirstName" in values or "teacherLastName" in values
        ):
            values["teacherName"] = _join_name(values, "teacherFirstName", "teacherLastName")
        return values


class TeacherEntry(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    classification: Literal["standard", "new_trainer", "inactive"] = "standard"
    specialties: List[str] = []
    maxHours: Optional[float] = None

    @model_validator(mode="before")
    @classmethod
    def map_custom_teacher(cls, values: Any) -> Any:
        """Build name from firstName/lastName and classification from isNew / isActive flags."""
        if not isinstance(values, dict):
            return values
        if "name" not in values and ("firstName" in values or "lastName" in values):
            values["name"] = _join_name(values, "firstName", "lastName")
        if "classification" not in values:
            if values.get("isActive") is False or values.get("inactive") is True:
                values["classification"] = "inactive"
            elif values.get("isNew") is True:
                values["classification"] = "new_trainer"
        return values


class SynthesisOptionsIn(BaseModel):
    model_config = ConfigDict(extra="allow")

    prioritizeTopPerformers: bool = True
    balanceShifts: bool = True
    optimizeTeacherHours: bool = True
    respectTimeRestrictions: bool = True
    minimizeTrainersPerShift: bool = True
    optimizationType: Literal["revenue", "attendance", "balanced"] = "balanced"
    iteration: int = Field(default=0, ge=0)
    targetDay: Optional[str] = None
    targetTeacherHours: float = Field(default=MAX_WEEKLY_HOURS, gt=0)
    preserveTopClasses: bool = False


class ScheduledClassIn(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    day: str
    time: str
    location: str
    classFormat: str
    teacher: str
    duration: Optional[float] = None
    participants: int = 0
    revenue: float = 0.0
    isTopPerformer: bool = False
    isPrivate: bool = False
    isLocked: bool = False
    source: str = "manual"

    @model_validator(mode="before")
    @classmethod
    def extract_teacher(cls, values: Any) -> Any:
        """Classes from the UI carry teacherFirstName / teacherLastName instead of teacher."""
        if isinstance(values, dict) and not values.get("teacher"):
            values["teacher"] = _join_name(values, "teacherFirstName", "teacherLastName")
        return values


class SynthesizeRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    records: List[PerformanceRecordIn]
    teachers: List[TeacherEntry] = []
    options: SynthesisOptionsIn = Field(default_factory=SynthesisOptionsIn)
    currentSchedule: List[ScheduledClassIn] = []


class FillGapsRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    records: List[PerformanceRecordIn]
    teachers: List[TeacherEntry] = []
    schedule: List[ScheduledClassIn] = []


class ValidateEditRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    schedule: List[ScheduledClassIn] = []
    proposed: ScheduledClassIn
    teachers: List[TeacherEntry] = []
    targetTeacherHours: float = Field(default=MAX_WEEKLY_HOURS, gt=0)

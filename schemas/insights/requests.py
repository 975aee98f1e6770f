from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional
from schemas.schedule.synthesize import PerformanceRecordIn, ScheduledClassIn, TeacherEntry
from utils.constants import MAX_WEEKLY_HOURS, MIN_SPECIALTY_CHECKED_IN


class TopClassesRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    records: List[PerformanceRecordIn]
    teachers: List[TeacherEntry] = []
    minAvgCheckedIn: float = Field(default=MIN_SPECIALTY_CHECKED_IN, ge=0)
    limit: int = Field(default=20, gt=0)
    # when set, the response also lists this teacher's specialties
    teacher: Optional[str] = None


class SuggestionsRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    records: List[PerformanceRecordIn] = []
    teachers: List[TeacherEntry] = []
    schedule: List[ScheduledClassIn]
    targetTeacherHours: float = Field(default=MAX_WEEKLY_HOURS, gt=0)

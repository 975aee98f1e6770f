top_classes_description = """
List the best attended (format, location, day, time) combinations

### Request Body

- `records`: Historical class records (see `/schedule/synthesize`)
- `teachers`: Custom teacher entries (Optional)
- `minAvgCheckedIn`: Minimum average check-ins (default 5.0)
- `limit`: Maximum number of classes returned (default 20)
- `teacher`: Also return this teacher's specialties (Optional)

### Response

- `topClasses`: Combinations with the teacher who drew the most check-ins, average participants, average revenue and frequency
- `specialties`: Up to five formats the teacher averages at least 5 check-ins in (only when `teacher` is given)
"""

suggestions_description = """
Suggest trainer changes for an existing schedule

Looks for teachers over their weekly cap, teachers at more than one location on a day and teachers over the daily class limit. Each suggestion hands one class to an alternative teacher and is validated against the schedule.

### Request Body

- `schedule`: Current scheduled classes
- `records`: Historical class records, used to prefer teachers with history in the format (Optional)
- `teachers`: Custom teacher entries (Optional)
- `targetTeacherHours`: Standard weekly cap (default 15)

### Response

- `suggestions`: Up to five suggestions, highest priority first
"""

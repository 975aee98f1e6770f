synthesize_description = """
Synthesize a weekly class schedule from historical class performance

### Request Body

- `records`: List of historical class records, each containing:
    - `classFormat` (or `cleanedClass`): Cleaned class format, e.g. "Studio Barre 57"
    - `location`: Studio name
    - `dayOfWeek`: Full weekday name, e.g. "Monday"
    - `time` (or `classTime`): Start time, e.g. "07:30" or "7:30 AM"
    - `teacherName` (or `teacherFirstName` + `teacherLastName`): Full teacher name
    - `checkedIn`: Number of participants who checked in
    - `revenue` (or `totalRevenue`): Revenue of the session (Optional)

    Hosted classes, formats containing "-" and rows with unusable times are ignored.

- `teachers`: List of custom teacher entries merged with the teachers found in the records: (Optional)
    - `name` (or `firstName` + `lastName`): Full teacher name
    - `classification`: "standard", "new_trainer" (10h weekly cap, restricted formats) or "inactive" (never scheduled)
    - `specialties`: List of class formats
    - `maxHours`: Weekly hour cap overriding the classification cap

- `options`: Synthesis options: (Optional)
    - `prioritizeTopPerformers`: Fill top-performing slots first (default true)
    - `balanceShifts`: Require at least two Barre 57 classes per morning and evening shift (default true)
    - `optimizeTeacherHours`: Use `targetTeacherHours` as the standard weekly cap (default true)
    - `respectTimeRestrictions`: Keep the midday window free (default true)
    - `minimizeTrainersPerShift`: Prefer teachers already working the shift (default true)
    - `optimizationType`: "revenue", "attendance" or "balanced" (default "balanced")
    - `iteration`: Variation counter; different values give different valid schedules (default 0)
    - `targetDay`: Only schedule this day (Optional)
    - `targetTeacherHours`: Standard weekly cap (default 15)
    - `preserveTopClasses`: Keep the top performers of `currentSchedule` (default false)

- `currentSchedule`: List of scheduled classes, used with `preserveTopClasses` (Optional)

### Response

- `schedule`: Scheduled classes in location, day and time order
- `summary`: Per-teacher weekly hours, caps, days and locations
- `stats`: Fill statistics per phase and rejection counts per rule
"""

fill_gaps_description = """
Fill free morning (07:00-11:45) and evening (17:00-20:00) rooms of an existing schedule and rebalance its class mix

### Request Body

- `records`: Historical class records (see `/schedule/synthesize`)
- `teachers`: Custom teacher entries (Optional)
- `schedule`: Existing scheduled classes; each needs `id`, `day`, `time`, `location`, `classFormat` and `teacher` (or `teacherFirstName` + `teacherLastName`)

Days with fewer than two Barre 57 classes get the missing ones, and days where one format runs more than three times get up to two missing variety formats.

### Response

- `schedule`: The full schedule after filling
- `added`: Only the classes that were added
"""

validate_edit_description = """
Validate one proposed class against the current schedule without changing it

### Request Body

- `schedule`: Current scheduled classes
- `proposed`: The new or edited class; an id already in the schedule is treated as an edit of that class
- `teachers`: Custom teacher entries (Optional)
- `targetTeacherHours`: Standard weekly cap (default 15)

### Response

- `status`: "valid", "warning" (within 2 hours of the weekly cap) or "invalid"
- `message`: Human readable reason
- `canOverride`: true only when exceeding the weekly cap is the only problem
- `violations`: Every rule that failed, with its type and severity
"""

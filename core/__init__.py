"""
core
----

Class scheduling engine components:

- HistoricalPerformanceIndex & SlotRecommender:
  Aggregate past class performance and pick the best (format, teacher) pair for a slot.

- Rule predicates & ConstraintManager:
  Define the studio and trainer rules and apply them, in order, to a proposed class.

- ScheduleLedger:
  Hold the committed classes of one run together with per-teacher hour indices.
"""

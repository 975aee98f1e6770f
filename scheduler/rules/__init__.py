"""
scheduler.rules
---------------

Exposes the pipeline phases by importing from:

- `historical`: Preserving current top performers and filling historically used slots.
- `quota`: Barre 57 minimum per morning and evening shift.
- `express`: Express classes in the commuter slots.
- `gaps`: Optional gap-fill and class-mix balancing over an existing schedule.

Allows unified access to all phase definitions via wildcard imports.
"""
from .historical import *
from .quota import *
from .express import *
from .gaps import *

"""
scheduler
---------

Main scheduling module. Initializes key components:

- `builder`: Synthesis and gap-fill entry points.
- `runner`: Ordered execution of the pipeline phases.
- `manual_edit`: Validation of a single manual edit.

Provides high-level access to core scheduling functionality.
"""
from .builder import fill_gaps, run_synthesis, synthesize
from .manual_edit import validate_edit

"""Assignment use cases."""

from compliancehub.application.use_cases.assignments.assignment_operations import (
    AssignmentService,
)

__all__ = ["AssignmentService"]

"""Domain value objects: immutable, self-validating, no identity."""

from compliancehub.domain.value_objects.core import AssignmentScope, ValidityWindow

__all__ = ["AssignmentScope", "ValidityWindow"]

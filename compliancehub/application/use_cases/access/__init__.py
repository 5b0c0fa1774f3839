"""Effective access use cases."""

from compliancehub.application.use_cases.access.resolve_effective_access import (
    ResolveEffectiveAccessUseCase,
)

__all__ = ["ResolveEffectiveAccessUseCase"]

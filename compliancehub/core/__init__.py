"""Core: config and application bootstrap.

Single place for settings and app wiring.
"""

from compliancehub.core.config import get_settings

__all__ = ["get_settings"]

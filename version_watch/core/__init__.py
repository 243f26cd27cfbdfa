"""
Stable facade: exception types only. Do not add exports without updating __all__.
"""

from __future__ import annotations

from .errors import RequestAlreadySentError, UnrecognizedSelectionRuleError, VersionWatchError

# Do not add exports without updating __all__.
__all__ = ["RequestAlreadySentError", "UnrecognizedSelectionRuleError", "VersionWatchError"]

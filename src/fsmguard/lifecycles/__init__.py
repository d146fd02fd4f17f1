"""
Lifecycles — Domain wrappers built on the generic core.
"""

from fsmguard.lifecycles.grant import (
    Grant,
    GrantStatus,
    GRANT_DEFINITION,
    GRANT_DEFINITION_DOCUMENT,
    LifecycleError,
)

__all__ = [
    "Grant",
    "GrantStatus",
    "GRANT_DEFINITION",
    "GRANT_DEFINITION_DOCUMENT",
    "LifecycleError",
]

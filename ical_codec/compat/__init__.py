"""Compatibility layer for handling calendar content with invalid values.

Behavior switches are context managers backed by context variables, so they
apply only to the calls made inside the `with` block of the current thread
or task.
"""

from .value_compat import enable_orphan_exceptions, enable_strict_values

__all__ = [
    "enable_orphan_exceptions",
    "enable_strict_values",
]

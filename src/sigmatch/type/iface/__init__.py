"""module containing utilities for runtime type-compatibility and protocol conformance"""

from ._compat import compatible
from ._error import DoesNotImplementError
from ._impl import first_violation, implements, satisfies, violations

__all__ = ("DoesNotImplementError", "compatible", "first_violation", "implements", "satisfies", "violations")

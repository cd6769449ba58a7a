"""wire checked substitute functions into unittest.mock objects"""

from ._delegate import do, do_and_return

__all__ = ("do", "do_and_return")

from .factory import get_logger, set_enabled

__all__ = ["get_logger", "set_enabled"]

from loguru import logger

from . import config, log, mock, signature, type  # noqa: A004

__all__ = ["config", "log", "mock", "signature", "type"]

# library convention for loguru: silent unless the host application opts in
logger.disable(__name__)


def __dir__():
	return __all__


def __getattr__(name):
	if name in __all__:
		return globals()[name]
	raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

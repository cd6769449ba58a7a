from __future__ import annotations

from functools import lru_cache

import loguru
from loguru import logger

_PACKAGE = "sigmatch"


@lru_cache
def get_logger(logger_name: str | None = None) -> loguru.Logger:
	"""

	Return a cached loguru Logger optionally bound with a humanized name.

	If a name is provided, the returned logger is bound with extra["logger_name"]
	in a " sigmatch -> signature -> validate " format so it can be referenced in loguru sinks.

	**Parameters:**

	- `logger_name`: Dotted logger name (e.g., "sigmatch.mock.delegate"). If None, return the global logger.

	"""

	return logger if logger_name is None else logger.bind(logger_name=f" {logger_name.replace('.', ' -> ')} ")


def set_enabled(enabled: bool) -> None:
	"""toggle every record emitted from inside the package"""
	if enabled:
		logger.enable(_PACKAGE)
	else:
		logger.disable(_PACKAGE)

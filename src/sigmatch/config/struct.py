from __future__ import annotations

import re
from os import PathLike, getenv
from types import NoneType, UnionType
from typing import TYPE_CHECKING, Any, get_args, get_type_hints

from dotenv import load_dotenv

from sigmatch.log import get_logger

from .field import AllowedTypes, SettingsField

if TYPE_CHECKING:
	from loguru import Logger

_TRUTHY = ("yes", "true", "1", "y", "on")


def _unwrap_type(tp: Any) -> Any:
	if isinstance(tp, UnionType):
		args = [a for a in get_args(tp) if a is not NoneType]
		return args[0] if args else NoneType
	return tp


def _evaluate_var(tp: Any, raw: str) -> Any:
	tp = _unwrap_type(tp)
	if tp is NoneType:
		return None
	if tp is bool:
		return raw.strip().lower() in _TRUTHY
	return tp(raw)


class AppSettings:
	"""

	Base class for reading typed settings from environment variables.

	Declare attributes with type annotations and assign SettingsField(...) to each.
	On initialization, values are resolved from the environment (loading .env if provided),
	then from default/factory, or set to None if nullable.

	**Example:**

		>>> class MySettings(AppSettings):
		...	 SIGMATCH_ALLOW_UNTYPED: bool = SettingsField(default=True)
		...
		>>> settings = MySettings()

	"""

	def __init__(
		self,
		dotenv_path: str | PathLike[str] | None = None,
		logger: Logger | None = None,
		explicit_format: bool = True,
		**overrides: Any,
	) -> None:
		"""

		Initialize AppSettings and resolve annotated fields.

		**Parameters:**

		- `dotenv_path`: Optional path to a .env file. If None, python-dotenv searches recursively.
		- `logger`: Optional loguru logger.
		- `explicit_format`: If True, attribute names must be uppercase with underscores.
		- `overrides`: Explicit values that win over the environment, keyed by attribute name.

		**Raises:**

		- `AttributeError`: If an attribute name violates explicit_format or an override names an unknown field.
		- `TypeError`: If a resolved value is not one of the allowed immutable types.
		- `ValueError`: If a required field (nullable=False, no default/factory) is missing in the environment.

		"""

		load_dotenv(dotenv_path=dotenv_path)

		self.__log = get_logger("sigmatch.config") if logger is None else logger

		hints = get_type_hints(self.__class__)
		fields = self.fields()

		if unknown := set(overrides) - set(fields):
			raise AttributeError(f"unknown settings: {', '.join(sorted(unknown))}")

		for attr, settings_field in fields.items():
			if explicit_format and not re.fullmatch(r"[A-Z][A-Z0-9_]*", attr):
				raise AttributeError("AppSettings attributes should contain only capital letters and underscores")

			if attr in overrides:
				setattr(self, attr, self.__validate(overrides[attr]))
				self.__log.debug(f"evaluated {attr} from override")
				continue

			string_value = getenv(attr, None)
			if string_value is None:
				self.__resolve_missing(attr, settings_field)
				continue

			setattr(self, attr, self.__validate(_evaluate_var(hints.get(attr, NoneType), string_value)))
			self.__log.debug(f"evaluated {attr} from environment")

	@classmethod
	def fields(cls) -> dict[str, SettingsField]:
		found: dict[str, SettingsField] = {}
		for base in reversed(cls.__mro__):
			found |= {attr: val for attr, val in vars(base).items() if isinstance(val, SettingsField)}
		return found

	def __resolve_missing(self, attr: str, settings_field: SettingsField) -> None:
		if settings_field.default is not None:
			setattr(self, attr, self.__validate(settings_field.default))
			self.__log.debug(f"evaluated {attr} from default")
			return

		if settings_field.factory is not None:
			setattr(self, attr, self.__validate(settings_field.factory()))
			self.__log.debug(f"evaluated {attr} from factory")
			return

		if settings_field.nullable:
			setattr(self, attr, None)
			self.__log.debug(f"evaluated {attr} as None (nullable)")
			return

		raise ValueError(f"reqd field {attr} was not found in .env")

	@staticmethod
	def __validate[T: Any](val: T) -> T:
		if type(val) not in get_args(AllowedTypes.__value__):
			raise TypeError(f"{type(val)} is not an allowed immutable type")
		return val

	def __repr__(self) -> str:
		body = ", ".join(f"{attr}={getattr(self, attr)!r}" for attr in self.fields())
		return f"{self.__class__.__name__}({body})"

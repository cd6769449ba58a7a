from collections.abc import Callable
from dataclasses import dataclass

type AllowedTypes = int | float | str | bool | None


@dataclass(init=True, slots=True, frozen=True)
class SettingsField[T: AllowedTypes]:
	"""

	Typed field declaration for AppSettings.

	**Attributes:**

	- `default`: Optional fallback value when the variable is missing.
	- `factory`: A callable returning a value, used when there is no default.
	- `nullable`: Whether None is allowed when no value is provided and no default/factory is set.

	"""

	default: T | None = None
	factory: Callable[[], T] | None = None
	nullable: bool = False

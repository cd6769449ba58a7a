import inspect
import typing
from collections.abc import Callable
from functools import wraps
from typing import Any
from unittest.mock import DEFAULT, NonCallableMock

from sigmatch.config import SigmatchSettings, get_settings
from sigmatch.log import get_logger
from sigmatch.signature import FunctionSignature, ensure_compatible

_log = get_logger("sigmatch.mock")


def _pack_variadic(substitute: Callable[..., Any], index: int, container: type) -> Callable[..., Any]:
	"""collect the values passed for ``*args`` into the one sequence argument the substitute takes instead"""
	if inspect.iscoroutinefunction(substitute):

		@wraps(substitute)
		async def apacked(*args: Any, **kwargs: Any) -> Any:
			return await substitute(*args[:index], container(args[index:]), **kwargs)

		return apacked

	@wraps(substitute)
	def packed(*args: Any, **kwargs: Any) -> Any:
		return substitute(*args[:index], container(args[index:]), **kwargs)

	return packed


def _discard_result[**P](substitute: Callable[P, Any]) -> Callable[P, Any]:
	"""run the substitute for its effects and let the mock answer with its own return_value"""
	if inspect.iscoroutinefunction(substitute):

		@wraps(substitute)
		async def awrapper(*args: P.args, **kwargs: P.kwargs) -> Any:
			await substitute(*args, **kwargs)
			return DEFAULT

		return awrapper

	@wraps(substitute)
	def wrapper(*args: P.args, **kwargs: P.kwargs) -> Any:
		substitute(*args, **kwargs)
		return DEFAULT

	return wrapper


def _callable_as_declared(declared: FunctionSignature, substitute: FunctionSignature, func: Callable) -> Callable:
	# the mock is called the way `declared` is; a substitute taking a sequence for *args needs the values packed
	if not declared.variadic or substitute.variadic:
		return func
	index = declared.variadic_index
	container = tuple if typing.get_origin(substitute.params[index].annotation) is tuple else list
	return _pack_variadic(func, index, container)


def _attach[M: NonCallableMock](
	mock: M,
	declared: Callable,
	substitute: Callable,
	settings: SigmatchSettings | None,
	*,
	keep_return_value: bool,
) -> M:
	if not isinstance(mock, NonCallableMock) or not callable(mock):
		raise TypeError(f"expected a callable unittest.mock object, got {type(mock).__name__}")

	settings = settings or get_settings()
	declared_sig = FunctionSignature.of(declared, settings=settings)
	substitute_sig = FunctionSignature.of(substitute, settings=settings)
	ensure_compatible(declared_sig, substitute_sig, settings=settings)

	effect = _callable_as_declared(declared_sig, substitute_sig, substitute)
	mock.side_effect = _discard_result(effect) if keep_return_value else effect
	_log.debug("delegating {} to {}", declared_sig, substitute_sig)
	return mock


def do[M: NonCallableMock](
	mock: M,
	declared: Callable,
	substitute: Callable,
	*,
	settings: SigmatchSettings | None = None,
) -> M:
	"""

	Run `substitute` whenever `mock` is called; the call still returns ``mock.return_value``.

	A substitute that takes the declared ``*args`` as one sequence parameter receives
	the variadic values packed into a list (a tuple, when it asks for a tuple).

	**Parameters:**

	- `mock`: the Mock/MagicMock/AsyncMock standing for `declared`.
	- `declared`: the real method being mocked.
	- `substitute`: a function with a compatible signature.

	**Raises:**

	- `SignatureMismatchError`: if `substitute` cannot stand in for `declared`; `mock` is left untouched.

	"""
	return _attach(mock, declared, substitute, settings, keep_return_value=True)


def do_and_return[M: NonCallableMock](
	mock: M,
	declared: Callable,
	substitute: Callable,
	*,
	settings: SigmatchSettings | None = None,
) -> M:
	"""

	Like `do`, but the result of `substitute` becomes the result of the call.

	**Raises:**

	- `SignatureMismatchError`: if `substitute` cannot stand in for `declared`; `mock` is left untouched.

	"""
	return _attach(mock, declared, substitute, settings, keep_return_value=False)

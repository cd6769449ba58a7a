from __future__ import annotations

import functools
import inspect
import types
import typing
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field

from sigmatch.config import SigmatchSettings, get_settings
from sigmatch.type import TypeDescriptor
from sigmatch.type.iface._extr import _annotation, _hints

_RECEIVERS = ("self", "cls")
_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
VAR_KEYWORD = "**"
_EMPTY_TUPLES = (tuple[()], typing.Tuple[()])  # noqa: UP006


def _hints_target(func: Callable) -> typing.Any:
	while isinstance(func, functools.partial):
		func = func.func
	if inspect.isroutine(func) or inspect.isclass(func):
		return func
	# callable instance
	return type(func).__call__


def _takes_receiver(func: Callable) -> bool:
	"""a function looked up on its class still lists its `self` or `cls`"""
	if not inspect.isfunction(func):
		return False
	owner, _, _ = func.__qualname__.rpartition(".")
	return bool(owner) and not owner.endswith("<locals>")


def _is_coroutine(func: Callable) -> bool:
	while isinstance(func, functools.partial):
		func = func.func
	if not (inspect.isroutine(func) or inspect.isclass(func)):
		func = type(func).__call__
	return inspect.iscoroutinefunction(inspect.unwrap(func))


def _split_returns(annotation: typing.Any, expand_tuples: bool) -> tuple[TypeDescriptor, ...] | None:
	if annotation is inspect.Signature.empty:
		return None
	if annotation is None or annotation is types.NoneType:
		return ()
	if not expand_tuples or typing.get_origin(annotation) is not tuple:
		return (TypeDescriptor.of(annotation),)
	if annotation in _EMPTY_TUPLES:
		return ()
	args = typing.get_args(annotation)
	if args and args[-1] is not Ellipsis:
		return tuple(TypeDescriptor.of(a) for a in args)
	return (TypeDescriptor.of(annotation),)


@dataclass(frozen=True, slots=True)
class FunctionSignature:
	"""

	The comparable shape of a callable: positional parameters, keyword parameters and return values.

	**Attributes:**

	- `params`: positional parameter types in order; a declared ``*args: T`` is the last entry, as ``tuple[T, ...]``.
	- `variadic`: whether the last entry of `params` is a ``*args`` parameter.
	- `keywords`: keyword-only parameter types by name; ``**kwargs: V`` is stored under ``"**"`` as ``dict[str, V]``.
	- `returns`: return value types, or None when the return is unannotated.
	- `is_coroutine`: whether calling the function yields an awaitable.
	- `name`: used in messages only.

	"""

	params: tuple[TypeDescriptor, ...] = ()
	variadic: bool = False
	keywords: Mapping[str, TypeDescriptor] = field(default_factory=dict)
	returns: tuple[TypeDescriptor, ...] | None = ()
	is_coroutine: bool = False
	name: str = "func"

	@classmethod
	def of(cls, func: Callable, *, settings: SigmatchSettings | None = None) -> FunctionSignature:  # noqa: PLR0912
		"""

		Reflect a callable.

		A leading ``self``/``cls`` parameter is dropped so that methods taken from a class
		compare equal to the same methods taken from an instance.

		**Raises:**

		- `TypeError`: if `func` is not callable, is a class, or has no introspectable signature.

		"""
		if not callable(func):
			raise TypeError(f"expected a callable, got {type(func).__name__}")
		if inspect.isclass(func):
			raise TypeError(f"expected a function or method, got class {func.__name__}")

		settings = settings or get_settings()

		try:
			sig = inspect.signature(func)
		except (ValueError, TypeError) as e:
			raise TypeError(f"cannot introspect the signature of {func!r}") from e

		hints = _hints(_hints_target(func))

		def annotation_of(param: inspect.Parameter) -> typing.Any:
			return _annotation(hints, param.name, param.annotation)

		parameters = list(sig.parameters.values())
		if _takes_receiver(func) and parameters and parameters[0].name in _RECEIVERS and parameters[0].kind in _POSITIONAL:
			parameters = parameters[1:]

		params: list[TypeDescriptor] = []
		keywords: dict[str, TypeDescriptor] = {}
		variadic = False

		for param in parameters:
			match param.kind:
				case inspect.Parameter.POSITIONAL_ONLY | inspect.Parameter.POSITIONAL_OR_KEYWORD:
					params.append(TypeDescriptor.of(annotation_of(param)))
				case inspect.Parameter.VAR_POSITIONAL:
					params.append(TypeDescriptor.variadic(annotation_of(param)))
					variadic = True
				case inspect.Parameter.KEYWORD_ONLY:
					keywords[param.name] = TypeDescriptor.of(annotation_of(param))
				case inspect.Parameter.VAR_KEYWORD:
					keywords[VAR_KEYWORD] = TypeDescriptor.keywords(annotation_of(param))

		return cls(
			params=tuple(params),
			variadic=variadic,
			keywords=keywords,
			returns=_split_returns(_annotation(hints, "return", sig.return_annotation), settings.expand_tuple_returns),
			is_coroutine=_is_coroutine(func),
			name=getattr(func, "__qualname__", None) or getattr(func, "__name__", None) or type(func).__name__,
		)

	@classmethod
	def build(
		cls,
		params: Iterable[typing.Any] = (),
		returns: Iterable[typing.Any] | None = (),
		*,
		variadic: bool = False,
		keywords: Mapping[str, typing.Any] | None = None,
		is_coroutine: bool = False,
		name: str = "func",
	) -> FunctionSignature:
		"""

		Construct a signature straight from annotations.

		With `variadic`, the last annotation in `params` is the element type of ``*args``.

		"""
		annotations = list(params)
		if variadic and not annotations:
			raise ValueError("a variadic signature needs at least one parameter")
		described = [TypeDescriptor.of(a) for a in annotations]
		if variadic:
			described[-1] = TypeDescriptor.variadic(annotations[-1])
		return cls(
			params=tuple(described),
			variadic=variadic,
			keywords={
				k: TypeDescriptor.keywords(v) if k == VAR_KEYWORD else TypeDescriptor.of(v) for k, v in (keywords or {}).items()
			},
			returns=None if returns is None else tuple(TypeDescriptor.of(r) for r in returns),
			is_coroutine=is_coroutine,
			name=name,
		)

	@property
	def variadic_index(self) -> int | None:
		return len(self.params) - 1 if self.variadic else None

	def __str__(self) -> str:
		shown = [str(p) for p in self.params]
		if self.variadic:
			shown[-1] = f"*{self.params[-1].elem}"
		shown += [f"**{d.elem}" if k == VAR_KEYWORD else f"{k}: {d}" for k, d in self.keywords.items()]
		prefix = "async " if self.is_coroutine else ""
		if self.returns is None:
			ret = ""
		elif not self.returns:
			ret = " -> None"
		elif len(self.returns) == 1:
			ret = f" -> {self.returns[0]}"
		else:
			ret = f" -> ({', '.join(str(r) for r in self.returns)})"
		return f"{prefix}{self.name}({', '.join(shown)}){ret}"

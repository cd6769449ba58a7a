import inspect
import sys
import types
import typing
from collections.abc import Callable, Iterator, Mapping

from sigmatch.type.unset import Unset

# class-body names that typing, abc and the interpreter put there; never protocol members
_MACHINERY = frozenset(
	{
		"__abstractmethods__", "__annotate__", "__annotate_func__", "__annotations__", "__annotations_cache__",
		"__callable_proto_members_only__", "__class_getitem__", "__dict__", "__doc__", "__firstlineno__",
		"__init__", "__match_args__", "__module__", "__new__", "__non_callable_proto_members__",
		"__orig_bases__", "__orig_class__", "__parameters__", "__protocol_attrs__", "__qualname__",
		"__slots__", "__static_attributes__", "__subclasshook__", "__type_params__", "__weakref__",
		"_is_protocol", "_is_runtime_protocol", "_MutableMapping__marker",
	}
)  # fmt: skip

_UNRESOLVABLE = (NameError, AttributeError, SyntaxError, TypeError)

type MethodKind = typing.Literal["method", "static", "classmethod", "property"]


def _members(protocol: type) -> dict[str, typing.Any]:
	"""

	Every name a protocol declares, own and inherited, mapped to its raw class-body value.

	Annotation-only members map to None.

	"""
	found: dict[str, typing.Any] = {}
	for base in protocol.__mro__:
		if base is object or base is typing.Protocol or base is typing.Generic:
			continue
		for name in (*vars(base), *inspect.get_annotations(base)):
			if name in found or name in _MACHINERY or name.startswith("_abc_"):
				continue
			found[name] = vars(base).get(name)
	return found


def _namespaces(obj: typing.Any) -> tuple[dict[str, typing.Any], dict[str, typing.Any] | None]:
	if isinstance(obj, type):
		module = sys.modules.get(obj.__module__)
		return (vars(module) if module else {}), dict(vars(obj))
	return getattr(inspect.unwrap(obj), "__globals__", {}), None


def _evaluate(annotation: typing.Any, globalns: dict[str, typing.Any], localns: dict[str, typing.Any] | None) -> typing.Any:
	if annotation is None:
		return types.NoneType
	if not isinstance(annotation, str):
		return annotation
	try:
		return eval(annotation, globalns, localns)  # noqa: S307
	except _UNRESOLVABLE:
		return Unset


def _each_hint(obj: typing.Any) -> Iterator[tuple[str, typing.Any]]:
	owners = reversed(obj.__mro__) if isinstance(obj, type) else (inspect.unwrap(obj),)
	for owner in owners:
		globalns, localns = _namespaces(owner)
		try:
			annotations = inspect.get_annotations(owner)
		except _UNRESOLVABLE:
			continue
		for name, annotation in annotations.items():
			if (resolved := _evaluate(annotation, globalns, localns)) is not Unset:
				yield name, resolved


def _hints(obj: type | Callable) -> dict[str, typing.Any]:
	"""

	Resolved annotations of a class or callable.

	When the annotations cannot be resolved all together, each one is resolved on its
	own; a name whose annotation still fails (a ``TYPE_CHECKING``-only import, a typo)
	is left out, so that callers treat it like a missing annotation.

	"""
	try:
		return typing.get_type_hints(obj)
	except _UNRESOLVABLE:
		return dict(_each_hint(obj))


def _annotation(hints: Mapping[str, typing.Any], name: str, raw: typing.Any) -> typing.Any:
	"""the resolved annotation for `name`; a string that did not resolve counts as none"""
	if name in hints:
		return hints[name]
	return inspect.Parameter.empty if isinstance(raw, str) else raw


def _unwrap(obj: typing.Any) -> tuple[typing.Any, MethodKind]:
	match obj:
		case staticmethod():
			return obj.__func__, "static"
		case classmethod():
			return obj.__func__, "classmethod"
		case property():
			return obj.fget, "property"
	return obj, "method"


def _raw(cls: type, name: str) -> typing.Any:
	"""the class-body value of `name`, found along the MRO without triggering descriptors"""
	return next((vars(base)[name] for base in cls.__mro__ if name in vars(base)), Unset)


def _params(obj: typing.Any) -> tuple[Mapping[str, inspect.Parameter], typing.Any]:
	"""

	Parameters and return annotation of a method as seen by its callers.

	The leading ``self``/``cls`` of a function taken from a class body is not part of it.
	Returns ``({}, Unset)`` when there is no introspectable signature.

	"""
	try:
		sig = inspect.signature(obj)
	except (ValueError, TypeError):
		return {}, Unset
	hints = _hints(obj)
	params = list(sig.parameters.values())
	if params and params[0].name in ("self", "cls"):
		params = params[1:]
	return (
		{p.name: p.replace(annotation=_annotation(hints, p.name, p.annotation)) for p in params},
		_annotation(hints, "return", sig.return_annotation),
	)

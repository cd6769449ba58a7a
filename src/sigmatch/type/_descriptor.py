from __future__ import annotations

import collections
import collections.abc
import inspect
import types
import typing
from dataclasses import dataclass, field
from enum import StrEnum

from .iface._compat import _is_proto, _is_union, _resolve, _tname, compatible


class Kind(StrEnum):
	PRIMITIVE = "primitive"
	INTERFACE = "interface"
	SEQUENCE = "sequence"
	SET = "set"
	MAPPING = "mapping"
	TUPLE = "tuple"
	STRUCT = "struct"
	FUNCTION = "function"
	CLASS = "class"


_PRIMITIVES = frozenset({int, float, complex, str, bytes, bytearray, bool, types.NoneType})

_SEQUENCES = frozenset(
	{
		list,
		tuple,
		collections.deque,
		collections.abc.Sequence,
		collections.abc.MutableSequence,
		collections.abc.Iterable,
		collections.abc.Iterator,
		collections.abc.Collection,
	}
)

_SETS = frozenset({set, frozenset, collections.abc.Set, collections.abc.MutableSet})

_MAPPINGS = frozenset(
	{
		dict,
		collections.defaultdict,
		collections.OrderedDict,
		collections.abc.Mapping,
		collections.abc.MutableMapping,
	}
)


def _strip(annotation: typing.Any) -> typing.Any:
	if annotation is inspect.Parameter.empty:
		return typing.Any
	if typing.get_origin(annotation) is typing.Annotated:
		return _strip(typing.get_args(annotation)[0])
	return _resolve(annotation)


def _identity(annotation: typing.Any) -> typing.Hashable:
	"""a hashable key equal for two annotations naming the very same type"""
	if isinstance(annotation, list | tuple):
		return tuple(_identity(a) for a in annotation)
	annotation = _strip(annotation)
	origin, args = typing.get_origin(annotation), typing.get_args(annotation)
	if origin is None:
		return annotation
	if _is_union(origin):
		return (typing.Union, frozenset(_identity(a) for a in args))
	if origin is typing.Literal:
		return (typing.Literal, frozenset(args))
	if not args:
		# typing.List and list, typing.Sequence and collections.abc.Sequence
		return origin
	return (origin, tuple(_identity(a) for a in args))


def _is_interface(annotation: typing.Any, origin: typing.Any) -> bool:
	if annotation is typing.Any or annotation is object or _is_union(origin):
		return True
	if origin is None and _is_proto(annotation):
		return True
	# abstract classes outside the collection ABCs, which have kinds of their own
	return (
		origin is None
		and isinstance(annotation, type)
		and inspect.isabstract(annotation)
		and annotation not in _SEQUENCES | _SETS | _MAPPINGS
	)


def _classify(annotation: typing.Any) -> tuple[Kind, typing.Any, typing.Any]:
	"""kind, element annotation, key annotation"""
	origin, args = typing.get_origin(annotation), typing.get_args(annotation)
	if _is_interface(annotation, origin):
		return Kind.INTERFACE, None, None
	if annotation in _PRIMITIVES or origin is typing.Literal:
		return Kind.PRIMITIVE, None, None

	container = origin if origin is not None else annotation
	if container is tuple:
		if not args:
			return Kind.SEQUENCE, typing.Any, None
		if len(args) == 2 and args[1] is Ellipsis:  # noqa: PLR2004
			return Kind.SEQUENCE, args[0], None
		return Kind.TUPLE, None, None
	if container in _SEQUENCES:
		return Kind.SEQUENCE, args[0] if args else typing.Any, None
	if container in _SETS:
		return Kind.SET, args[0] if args else typing.Any, None
	if container in _MAPPINGS:
		key, elem = args if len(args) == 2 else (typing.Any, typing.Any)  # noqa: PLR2004
		return Kind.MAPPING, elem, key
	if container is collections.abc.Callable:
		return Kind.FUNCTION, None, None
	if container is type:
		return Kind.CLASS, None, None
	return Kind.STRUCT, None, None


@dataclass(frozen=True, slots=True)
class TypeDescriptor:
	"""

	A read-only view of one reflected annotation.

	Two descriptors compare equal when they name the very same type; `convertible_to`
	answers the looser question of whether a value of this type may be used as the other.

	**Attributes:**

	- `annotation`: the annotation as found on the callable (with ``Annotated`` stripped).
	- `kind`: coarse classification driving the matching rules.
	- `elem`: element type of sequences, sets and mappings.
	- `key`: key type of mappings.
	- `explicit`: False when the source carried no annotation at all.

	"""

	annotation: typing.Any = field(compare=False)
	kind: Kind = field(compare=False)
	elem: TypeDescriptor | None = field(default=None, compare=False)
	key: TypeDescriptor | None = field(default=None, compare=False)
	explicit: bool = field(default=True, compare=False)
	identity: typing.Hashable = field(default=None, repr=False)

	@classmethod
	def of(cls, annotation: typing.Any) -> TypeDescriptor:
		explicit = annotation is not inspect.Parameter.empty
		annotation = _strip(annotation)
		kind, elem, key = _classify(annotation)
		return cls(
			annotation=annotation,
			kind=kind,
			elem=None if elem is None else cls.of(elem),
			key=None if key is None else cls.of(key),
			explicit=explicit,
			identity=_identity(annotation),
		)

	@classmethod
	def untyped(cls) -> TypeDescriptor:
		return cls.of(inspect.Parameter.empty)

	@classmethod
	def variadic(cls, elem: typing.Any) -> TypeDescriptor:
		"""the type a ``*args: elem`` parameter receives"""
		if elem is inspect.Parameter.empty:
			return cls.of(tuple[typing.Any, ...])
		return cls.of(tuple[_strip(elem), ...])

	@classmethod
	def keywords(cls, elem: typing.Any) -> TypeDescriptor:
		"""the type a ``**kwargs: elem`` parameter receives"""
		if elem is inspect.Parameter.empty:
			return cls.of(dict[str, typing.Any])
		return cls.of(dict[str, _strip(elem)])

	@property
	def name(self) -> str:
		return _tname(self.annotation)

	def convertible_to(self, other: TypeDescriptor, *, signatures: bool = True) -> bool:
		return compatible(other.annotation, self.annotation, strict=True, signatures=signatures)

	def __str__(self) -> str:
		return self.name

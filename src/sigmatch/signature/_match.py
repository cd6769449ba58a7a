import typing

from sigmatch.config import SigmatchSettings
from sigmatch.type import Kind, TypeDescriptor
from sigmatch.type.iface._compat import _is_proto
from sigmatch.type.iface._impl import first_violation

from ._outcome import Code, Violation


def match_interface(
	substitute: TypeDescriptor,
	declared: TypeDescriptor,
	settings: SigmatchSettings,
) -> Violation | None:
	"""the substitute type only has to convert to the declared interface"""
	if substitute.convertible_to(declared, signatures=settings.protocol_signatures):
		return None

	detail = f"expected arg convertible to type {declared} not type {substitute}"
	if _is_proto(declared.annotation) and (why := first_violation(substitute.annotation, declared.annotation)):
		detail = f"{detail} ({why})"
	return Violation(Code.NOT_CONVERTIBLE, detail)


def _container(desc: TypeDescriptor) -> typing.Any:
	return typing.get_origin(desc.annotation) or desc.annotation


def _match_slot(
	substitute: TypeDescriptor,
	declared: TypeDescriptor,
	slot: str,
	settings: SigmatchSettings,
) -> Violation | None:
	if declared.kind is Kind.INTERFACE:
		if viol := match_interface(substitute, declared, settings):
			return viol.wrap(slot)
		return None
	if substitute != declared:
		return Violation(Code.TYPE_MISMATCH, f"expected {slot} of type {declared} not type {substitute}")
	return None


def match_mapping(
	substitute: TypeDescriptor,
	declared: TypeDescriptor,
	settings: SigmatchSettings,
) -> Violation | None:
	"""the same mapping type, then keys, then elements; interface-typed slots are lenient, the rest need the same type"""
	if _container(substitute) is not _container(declared):
		return Violation(Code.TYPE_MISMATCH, f"expected arg of type {declared} not type {substitute}")
	return _match_slot(substitute.key, declared.key, "map key", settings) or _match_slot(
		substitute.elem, declared.elem, "map element", settings
	)


def match_variadic(
	substitute: TypeDescriptor,
	declared: TypeDescriptor,
	settings: SigmatchSettings,
) -> bool:
	"""

	Whether `substitute`, the type of an ordinary parameter, can receive what ``*args`` would.

	`declared` is the ``tuple[T, ...]`` descriptor of the declared ``*args: T``.

	"""
	if substitute == declared or (not substitute.explicit and settings.allow_untyped):
		return True
	if substitute.kind is not Kind.SEQUENCE:
		return False

	declared_elem, sub_elem = declared.elem, substitute.elem
	if sub_elem == declared_elem:
		return True

	signatures = settings.protocol_signatures
	if declared_elem.kind is Kind.INTERFACE and sub_elem.convertible_to(declared_elem, signatures=signatures):
		return True
	if sub_elem.kind is Kind.INTERFACE and declared_elem.convertible_to(sub_elem, signatures=signatures):
		return True
	return False


def match_arg(
	substitute: TypeDescriptor,
	declared: TypeDescriptor,
	settings: SigmatchSettings,
) -> Violation | None:
	if not substitute.explicit and settings.allow_untyped:
		return None

	# If the declared type is an interface we only care if the substitute converts to it
	if declared.kind is Kind.INTERFACE:
		return match_interface(substitute, declared, settings)

	if substitute.kind is not declared.kind:
		return Violation(Code.KIND_MISMATCH, f"expected arg of kind {declared.kind} not {substitute.kind}")

	# mappings may still have interface-typed keys or elements
	if declared.kind is Kind.MAPPING:
		return match_mapping(substitute, declared, settings)

	if substitute != declared:
		return Violation(Code.TYPE_MISMATCH, f"expected arg of type {declared} not type {substitute}")

	return None

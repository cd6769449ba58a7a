from typing import Any, Protocol

import pytest

from sigmatch.type.iface import DoesNotImplementError, first_violation, implements, satisfies, violations

# ============================================================
# exception
# ============================================================


class TestDoesNotImplementError:
	def test_stores_violations_proto_failed(self):
		viols = ["expected member `foo`", "wrong type"]

		err = DoesNotImplementError(viols, Protocol, object)

		assert err.violations is viols
		assert err.proto is Protocol
		assert err.target is object

	def test_repr_contains_all_violations(self):
		viols = ["expected member `foo`", "wrong type bar"]
		r = repr(DoesNotImplementError(viols, Protocol, object))

		assert "does not implement protocol" in r
		for v in viols:
			assert v in r

	def test_str_equals_repr(self):
		err = DoesNotImplementError(["v"], Protocol, object)
		assert str(err) == repr(err)

	def test_first(self):
		assert DoesNotImplementError(["a", "b"], Protocol, object).first == "a"
		assert DoesNotImplementError([], Protocol, object).first is None

	def test_is_base_exception(self):
		err = DoesNotImplementError([], Protocol, object)
		assert isinstance(err, BaseException)
		assert not isinstance(err, Exception)


# ============================================================
# shared protocols
# ============================================================


class Reader(Protocol):
	def read(self, size: int) -> bytes: ...


class Named(Protocol):
	name: str


class Node(Protocol):
	def next(self) -> "Node": ...


class Link:
	def next(self) -> "Link":
		return self


# ============================================================
# members
# ============================================================


class TestMembers:
	def test_correct_method(self):
		class File:
			def read(self, size: int) -> bytes:
				return b""

		implements(File, Reader)

	def test_attr_annotation_only(self):
		class User:
			name: str

		implements(User, Named)

	def test_extra_members_ok(self):
		class User:
			name: str = "root"
			uid: int = 0

		implements(User, Named)

	def test_missing_method(self):
		class Empty:
			pass

		with pytest.raises(DoesNotImplementError, match="expected member `read`"):
			implements(Empty, Reader)

	def test_missing_attr(self):
		class Empty:
			pass

		with pytest.raises(DoesNotImplementError, match=r"expected annotated attribute `name` \(type=str\), found none"):
			implements(Empty, Named)

	def test_attr_type_mismatch(self):
		class User:
			name: int = 0

		with pytest.raises(DoesNotImplementError, match="expected `name` to be of type str, found int"):
			implements(User, Named)

	def test_method_is_not_callable(self):
		class File:
			read: str = "nope"

		with pytest.raises(DoesNotImplementError, match="expected `read` to be callable"):
			implements(File, Reader)

	def test_attr_is_callable(self):
		class User:
			def name(self) -> str:
				return "root"

		with pytest.raises(DoesNotImplementError, match="expected `name` to be a data attribute"):
			implements(User, Named)

	def test_inherited_method_satisfies(self):
		class Base:
			def read(self, size: int) -> bytes:
				return b""

		class File(Base):
			pass

		implements(File, Reader)

	def test_non_protocol_raises_typeerror(self):
		class Plain:
			pass

		with pytest.raises(TypeError, match="expected protocol"):
			implements(Plain, Plain)


# ============================================================
# signatures
# ============================================================


class TestSignatures:
	def test_param_must_accept_protocol_type(self):
		class File:
			def read(self, size: str) -> bytes:
				return b""

		with pytest.raises(DoesNotImplementError, match="to accept type int, got str"):
			implements(File, Reader)

	def test_wider_param_accepted(self):
		class File:
			def read(self, size: float) -> bytes:
				return b""

		implements(File, Reader)

	def test_return_type_mismatch(self):
		class File:
			def read(self, size: int) -> str:
				return ""

		with pytest.raises(DoesNotImplementError, match="expected bytes as a return type of method `read`, got str"):
			implements(File, Reader)

	def test_missing_param(self):
		class Proto(Protocol):
			def m(self, a: int, b: str) -> None: ...

		class Impl:
			def m(self, a: int) -> None:
				pass

		with pytest.raises(DoesNotImplementError, match="expected parameter `b`"):
			implements(Impl, Proto)

	def test_extra_required_param(self):
		class File:
			def read(self, size: int, offset: int) -> bytes:
				return b""

		with pytest.raises(DoesNotImplementError, match="unexpected required parameter `offset` on method `read`"):
			implements(File, Reader)

	def test_extra_param_with_default_ok(self):
		class File:
			def read(self, size: int, offset: int = 0) -> bytes:
				return b""

		implements(File, Reader)

	def test_signatures_disabled(self):
		class File:
			def read(self, totally: float, different: bytes) -> dict:
				return {}

		implements(File, Reader, signatures=False)

	def test_type_hints_disabled(self):
		class User:
			name: int = 42

		implements(User, Named, type_hints=False)

	def test_unannotated_impl_not_checked(self):
		class File:
			def read(self, size):
				return b""

		implements(File, Reader)


class TestVarArgs:
	def test_kwargs_absorbs_named(self):
		class File:
			def read(self, **kwargs: Any) -> bytes:
				return b""

		implements(File, Reader)

	def test_args_absorbs_positional(self):
		class File:
			def read(self, *args: Any) -> bytes:
				return b""

		implements(File, Reader)

	def test_args_does_not_absorb_keyword_only(self):
		class Proto(Protocol):
			def m(self, *, key: int) -> None: ...

		class Impl:
			def m(self, *args: Any) -> None:
				pass

		with pytest.raises(DoesNotImplementError, match="expected keyword parameter `key`"):
			implements(Impl, Proto)


class TestParamKinds:
	def test_keyword_only_mismatch(self):
		class Proto(Protocol):
			def m(self, *, x: int) -> None: ...

		class Impl:
			def m(self, x: int) -> None:
				pass

		with pytest.raises(DoesNotImplementError, match="KEYWORD_ONLY"):
			implements(Impl, Proto)

	def test_positional_or_keyword_satisfies_positional_only(self):
		class Proto(Protocol):
			def m(self, x: int, /) -> None: ...

		class Impl:
			def m(self, x: int) -> None:
				pass

		implements(Impl, Proto)


# ============================================================
# properties / descriptor kinds
# ============================================================


class TestDescriptors:
	def test_property_satisfied_by_annotation(self):
		class Proto(Protocol):
			@property
			def name(self) -> str: ...

		class Impl:
			name: str = "x"

		implements(Impl, Proto)

	def test_property_mismatched_types(self):
		class Proto(Protocol):
			@property
			def name(self) -> str: ...

		class Impl:
			@property
			def name(self) -> int:
				return 0

		with pytest.raises(DoesNotImplementError, match="expected property `name` to be of type str, got int"):
			implements(Impl, Proto)

	def test_staticmethod_mismatch(self):
		class Proto(Protocol):
			@staticmethod
			def build() -> int: ...

		class Impl:
			def build(self) -> int:
				return 0

		with pytest.raises(DoesNotImplementError, match="expected `build` to be static, found method"):
			implements(Impl, Proto)

	def test_classmethod_match(self):
		class Proto(Protocol):
			@classmethod
			def create(cls) -> int: ...

		class Impl:
			@classmethod
			def create(cls) -> int:
				return 0

		implements(Impl, Proto)


# ============================================================
# protocol-typed annotations
# ============================================================


class TestNestedProtocols:
	def test_attr_typed_as_protocol(self):
		class Strable(Protocol):
			def __str__(self) -> str: ...

		class Proto(Protocol):
			attr: Strable

		class Impl:
			attr: str = "hello"

		implements(Impl, Proto)

	def test_union_partial_fail(self):
		class HasFoo(Protocol):
			def foo(self) -> int: ...

		class Good:
			def foo(self) -> int:
				return 1

		class Proto(Protocol):
			attr: HasFoo

		class Impl:
			attr: Good | str

		with pytest.raises(DoesNotImplementError):
			implements(Impl, Proto)

	def test_self_referential(self):
		assert satisfies(Link, Node)


# ============================================================
# lazy helpers
# ============================================================


class TestLazy:
	def test_violations_in_member_order(self):
		class Multi(Protocol):
			def foo(self) -> int: ...
			def bar(self) -> str: ...

			val: int

		class Empty:
			pass

		assert list(violations(Empty, Multi)) == [
			"expected member `foo`",
			"expected member `bar`",
			"expected annotated attribute `val` (type=int), found none",
		]

	def test_satisfies(self):
		class File:
			def read(self, size: int) -> bytes:
				return b""

		assert satisfies(File, Reader) is True
		assert satisfies(object, Reader) is False

	def test_first_violation(self):
		class File:
			def read(self, size: str) -> bytes:
				return b""

		assert "to accept type int, got str" in first_violation(File, Reader)
		assert first_violation(list[int], Reader) == "`list[int]` is not a class"


# ============================================================
# annotations that cannot be resolved
# ============================================================


class TestUnresolvableHints:
	def test_unresolvable_param_is_unchecked(self):
		class Proto(Protocol):
			def m(self, x: "Undefined") -> int: ...  # noqa: F821

		class Impl:
			def m(self, x: str) -> int:
				return 0

		implements(Impl, Proto)

	def test_sibling_annotations_still_checked(self):
		class Proto(Protocol):
			def m(self, x: "Undefined") -> int: ...  # noqa: F821

		class Impl:
			def m(self, x: str) -> str:
				return ""

		with pytest.raises(DoesNotImplementError, match="expected int as a return type of method `m`, got str"):
			implements(Impl, Proto)

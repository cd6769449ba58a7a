from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum
from typing import TYPE_CHECKING

from pydantic import BaseModel

if TYPE_CHECKING:
	from ._sig import FunctionSignature


class Code(StrEnum):
	ARITY_MISMATCH = "arity_mismatch"
	KIND_MISMATCH = "kind_mismatch"
	TYPE_MISMATCH = "type_mismatch"
	NOT_CONVERTIBLE = "not_convertible"
	VARIADIC_MISMATCH = "variadic_mismatch"
	AWAITABLE_MISMATCH = "awaitable_mismatch"


class Phase(StrEnum):
	INPUT = "input argument"
	KEYWORD = "keyword argument"
	RETURN = "return value"


@dataclass(frozen=True, slots=True)
class Violation:
	"""a single-position failure, before the validator places it in a phase"""

	code: Code
	detail: str

	def wrap(self, prefix: str) -> Violation:
		return replace(self, detail=f"{prefix}: {self.detail}")


@dataclass(frozen=True, slots=True)
class Mismatch:
	"""

	The first reason a substitute cannot stand in for a declared function.

	**Attributes:**

	- `code`: what went wrong.
	- `phase`: which half of the signature it went wrong in.
	- `position`: zero-based index, keyword name, or None for count mismatches.
	- `detail`: expected vs. actual, human readable.

	"""

	code: Code
	phase: Phase
	position: int | str | None
	detail: str

	@classmethod
	def at(cls, phase: Phase, position: int | str, violation: Violation) -> Mismatch:
		return cls(code=violation.code, phase=phase, position=position, detail=violation.detail)

	def __str__(self) -> str:
		if self.position is None:
			return self.detail
		return f"{self.phase} at {self.position}: {self.detail}"


class MismatchSchema(BaseModel):
	code: str
	phase: str
	position: int | str | None = None
	desc: str
	declared: str | None = None
	substitute: str | None = None


class SignatureMismatchError(BaseException):
	"""

	Raised when a substitute function is rejected at configuration time.

	Derives from BaseException so that code under test catching ``Exception``
	does not hide a misconfigured test double.

	"""

	def __init__(
		self,
		mismatch: Mismatch,
		declared: FunctionSignature | None = None,
		substitute: FunctionSignature | None = None,
	) -> None:
		self.mismatch = mismatch
		self.declared = declared
		self.substitute = substitute
		self.schema = MismatchSchema(
			code=mismatch.code.value,
			phase=mismatch.phase.value,
			position=mismatch.position,
			desc=mismatch.detail,
			declared=None if declared is None else str(declared),
			substitute=None if substitute is None else str(substitute),
		)
		super().__init__(str(self))

	@property
	def code(self) -> Code:
		return self.mismatch.code

	def __str__(self) -> str:
		if self.declared is None or self.substitute is None:
			return str(self.mismatch)
		return f"{self.substitute} cannot stand in for {self.declared}: {self.mismatch}"

	def __repr__(self) -> str:
		return f"{self.__class__.__name__}(code={self.code.value!r}, mismatch={str(self.mismatch)!r})"

import json

import pytest

from sigmatch.signature import Code, FunctionSignature, Mismatch, Phase, SignatureMismatchError, Violation


class TestViolation:
	def test_wrap_prefixes_detail(self):
		viol = Violation(Code.NOT_CONVERTIBLE, "expected arg convertible to type Sized not type int")

		wrapped = viol.wrap("map key")

		assert wrapped.code is Code.NOT_CONVERTIBLE
		assert wrapped.detail == "map key: expected arg convertible to type Sized not type int"
		assert viol.detail.startswith("expected")

	def test_frozen(self):
		viol = Violation(Code.TYPE_MISMATCH, "x")
		with pytest.raises(AttributeError):
			# pyrefly: ignore [read-only]
			viol.detail = "y"


class TestMismatch:
	def test_str_with_position(self):
		m = Mismatch.at(Phase.RETURN, 1, Violation(Code.TYPE_MISMATCH, "expected arg of type int not type str"))

		assert str(m) == "return value at 1: expected arg of type int not type str"

	def test_str_without_position(self):
		m = Mismatch(Code.ARITY_MISMATCH, Phase.INPUT, None, "expected function to have 2 arguments not 1")

		assert str(m) == "expected function to have 2 arguments not 1"


class TestSignatureMismatchError:
	@pytest.fixture
	def error(self) -> SignatureMismatchError:
		mismatch = Mismatch(Code.TYPE_MISMATCH, Phase.INPUT, 0, "expected arg of type int not type str")
		return SignatureMismatchError(
			mismatch,
			FunctionSignature.build([int], [bool], name="call"),
			FunctionSignature.build([str], [bool], name="do"),
		)

	def test_is_not_an_exception(self, error):
		assert isinstance(error, BaseException)
		assert not isinstance(error, Exception)

	def test_message(self, error):
		assert str(error) == "do(str) -> bool cannot stand in for call(int) -> bool: input argument at 0: expected arg of type int not type str"

	def test_schema(self, error):
		payload = json.loads(error.schema.model_dump_json())

		assert payload == {
			"code": "type_mismatch",
			"phase": "input argument",
			"position": 0,
			"desc": "expected arg of type int not type str",
			"declared": "call(int) -> bool",
			"substitute": "do(str) -> bool",
		}

	def test_without_signatures(self):
		err = SignatureMismatchError(Mismatch(Code.ARITY_MISMATCH, Phase.RETURN, None, "expected function to have 1 return values not 2"))

		assert str(err) == "expected function to have 1 return values not 2"
		assert err.schema.declared is None
		assert "arity_mismatch" in repr(err)

"""Tests for failure classification and envelope building."""

import pytest
from starlette.exceptions import HTTPException

from crashless.errors import (
    MASKED_MESSAGE,
    UNKNOWN_MESSAGE,
    DomainError,
    ErrorEnvelope,
    FailureKind,
    ForwardedFailure,
    build_envelope,
    classify,
    create_error,
    to_domain_error,
)


class CodedError(Exception):
    def __init__(self, message: str, code: str) -> None:
        super().__init__(message)
        self.code = code


class TestClassify:
    def test_domain_error(self):
        err = create_error("x")
        assert classify(err) == (FailureKind.DOMAIN, err)

    def test_http_exception_is_domain(self):
        exc = HTTPException(status_code=404, detail="Not Found")
        assert classify(exc)[0] is FailureKind.DOMAIN

    def test_exception_with_code_is_domain(self):
        assert classify(CodedError("x", "E_CODE"))[0] is FailureKind.DOMAIN

    def test_plain_exception_is_generic(self):
        assert classify(RuntimeError("boom"))[0] is FailureKind.GENERIC

    @pytest.mark.parametrize("value", [None, "oops", 42, {"message": "dict"}])
    def test_non_exceptions_are_malformed(self, value):
        assert classify(value) == (FailureKind.MALFORMED, value)

    def test_forwarded_failure_is_unboxed(self):
        err = create_error("inner", 409, "CONFLICT")
        assert classify(ForwardedFailure(err)) == (FailureKind.DOMAIN, err)
        assert classify(ForwardedFailure(None)) == (FailureKind.MALFORMED, None)


class TestToDomainError:
    def test_domain_error_passes_through(self):
        err = create_error("Boom", 400, "BAD_REQUEST")
        kind, result = to_domain_error(err)
        assert kind is FailureKind.DOMAIN
        assert result is err

    def test_domain_error_without_code_gets_derived_code(self):
        err = create_error("no code", 418, "")
        _, result = to_domain_error(err)
        assert result.code == "ERR_418"
        assert result.status == 418
        assert result.__cause__ is err

    def test_generic_error_uses_default_status(self):
        original = RuntimeError("Sync error")
        kind, result = to_domain_error(original, default_status=503)
        assert kind is FailureKind.GENERIC
        assert result.status == 503
        assert result.code == "ERR_503"
        assert result.message == "Sync error"
        assert result.__cause__ is original

    def test_generic_error_without_message_uses_class_name(self):
        _, result = to_domain_error(KeyError())
        assert result.message == "KeyError"

    def test_coded_error_without_status_uses_default_status(self):
        _, result = to_domain_error(CodedError("nope", "E_NOPE"), default_status=502)
        assert result.status == 502
        assert result.code == "E_NOPE"

    def test_http_exception_fields(self):
        _, result = to_domain_error(HTTPException(status_code=404, detail="Not Found"))
        assert result.status == 404
        assert result.code == "ERR_404"
        assert result.message == "Not Found"

    @pytest.mark.parametrize("value", [None, "text", ForwardedFailure(None)])
    def test_malformed_failures(self, value):
        kind, result = to_domain_error(value, default_status=503)
        assert kind is FailureKind.MALFORMED
        assert result.message == UNKNOWN_MESSAGE
        assert result.status == 500
        assert result.code == "ERR_500"


class TestBuildEnvelope:
    def test_production_masks_message_but_not_code(self):
        err = create_error("Sensitive info", 500, "SERVER_ERROR")
        envelope = build_envelope(err, production=True, mask_messages=True, stack="trace")
        assert envelope.message == MASKED_MESSAGE
        assert envelope.code == "SERVER_ERROR"
        assert envelope.stack is None

    def test_production_without_masking_keeps_message(self):
        err = create_error("Visible", 400, "BAD")
        envelope = build_envelope(err, production=True, mask_messages=False, stack="trace")
        assert envelope.message == "Visible"
        assert envelope.stack is None

    def test_development_exposes_stack(self):
        err = create_error("Dev fail", 500, "DEV_ERROR")
        envelope = build_envelope(err, production=False, mask_messages=True, stack="trace")
        assert envelope.message == "Dev fail"
        assert envelope.stack == "trace"

    def test_details_carried(self):
        err = create_error("Oops", 404, "NOT_FOUND", {"id": 99})
        envelope = build_envelope(err, production=False, mask_messages=True)
        assert envelope.details == {"id": 99}


class TestEnvelopeBody:
    def test_minimal_body(self):
        body = ErrorEnvelope(message="m", code="C", status=400).to_dict()
        assert body == {"success": False, "message": "m", "code": "C", "status": 400}

    def test_full_body(self):
        body = ErrorEnvelope(message="m", code="C", status=400, stack="s", details=[1]).to_dict()
        assert body["stack"] == "s"
        assert body["details"] == [1]

    def test_domain_error_to_dict_matches_envelope_fields(self):
        err = DomainError("m", 409, "CONFLICT")
        envelope = build_envelope(err, production=False, mask_messages=False)
        assert {k: v for k, v in envelope.to_dict().items() if k != "success"} == err.to_dict()

"""Testes da classificação de erros."""

from __future__ import annotations

import logging

import pytest

from app.domain.errors import (
    AuthError,
    ClassifiedError,
    DatabaseError,
    ErrorKind,
    ExternalApiError,
    GatewayError,
    NotFoundError,
    RateLimitedError,
    ValidationError,
    WebhookError,
)
from app.observability import trace_context
from app.services import classify, infer_kind, user_message_for


class TestInferKind:
    """Heurística para exceções sem tag."""

    @pytest.mark.parametrize(
        ("message", "expected"),
        [
            ("Database connection lost", ErrorKind.DATABASE),
            ("supabase timeout", ErrorKind.DATABASE),
            ("Rate limit reached", ErrorKind.RATE_LIMITED),
            ("HTTP 429 Too Many Requests", ErrorKind.RATE_LIMITED),
            ("Missing Permission", ErrorKind.AUTH),
            ("401 Unauthorized", ErrorKind.AUTH),
            ("Channel not found", ErrorKind.NOT_FOUND),
            ("something exploded", ErrorKind.UNKNOWN),
            ("", ErrorKind.UNKNOWN),
        ],
    )
    def test_rules(self, message: str, expected: ErrorKind) -> None:
        assert infer_kind(RuntimeError(message)) == expected

    def test_first_matching_rule_wins(self) -> None:
        assert infer_kind(RuntimeError("database permission not found")) == ErrorKind.DATABASE


class TestClassify:
    """Testes para classify()."""

    @pytest.mark.parametrize(
        ("error", "kind", "status_code"),
        [
            (AuthError("token expirado"), ErrorKind.AUTH, 401),
            (NotFoundError("sessão 42"), ErrorKind.NOT_FOUND, 404),
            (RateLimitedError("upstream", retry_after_seconds=3), ErrorKind.RATE_LIMITED, 429),
            (DatabaseError("insert falhou"), ErrorKind.DATABASE, 500),
            (ExternalApiError("discord 503"), ErrorKind.EXTERNAL_API, 502),
            (GatewayError("genérico"), ErrorKind.UNKNOWN, 500),
        ],
    )
    def test_tagged_errors_keep_kind_and_hide_message(
        self, error: GatewayError, kind: ErrorKind, status_code: int
    ) -> None:
        classified = classify(error)

        assert classified.kind == kind
        assert classified.status_code == status_code
        assert classified.user_message == user_message_for(kind)
        assert str(error) not in classified.user_message
        assert classified.cause is error

    def test_tag_overrides_heuristic(self) -> None:
        classified = classify(ExternalApiError("database said not found"))
        assert classified.kind == ErrorKind.EXTERNAL_API

    def test_explicit_kind_argument(self) -> None:
        assert classify(GatewayError("x", kind=ErrorKind.AUTH)).kind == ErrorKind.AUTH

    def test_validation_message_reaches_user(self) -> None:
        classified = classify(ValidationError("Email inválido"))
        assert classified.user_message == "❌ Email inválido"
        assert classified.severity == logging.WARNING

    def test_webhook_error_is_validation(self) -> None:
        assert classify(WebhookError("invalid_json")).status_code == 400

    def test_untagged_uses_heuristic(self) -> None:
        classified = classify(ConnectionError("supabase unreachable at 10.0.0.1"))

        assert classified.kind == ErrorKind.DATABASE
        assert "10.0.0.1" not in classified.user_message
        assert classified.severity == logging.ERROR

    def test_context_merges_details_and_type(self) -> None:
        error = DatabaseError("falhou", details={"table": "sessions"})

        classified = classify(error, {"operation": "db.insert"})

        assert classified.context["operation"] == "db.insert"
        assert classified.context["table"] == "sessions"
        assert classified.context["error_kind"] == "database"
        assert classified.context["error_type"] == "DatabaseError"
        assert "trace_id" not in classified.context
        assert classified.trace_id is None

    def test_context_includes_active_trace_id(self) -> None:
        with trace_context("trace-123"):
            classified = classify(RuntimeError("boom"))

        assert classified.trace_id == "trace-123"

    def test_context_is_read_only(self) -> None:
        classified = classify(RuntimeError("boom"), {"a": 1})
        with pytest.raises(TypeError):
            classified.context["a"] = 2  # type: ignore[index]

    def test_does_not_mutate_input_context(self) -> None:
        context = {"operation": "x"}
        classify(RuntimeError("boom"), context)
        assert context == {"operation": "x"}

    def test_classified_error_passes_through(self) -> None:
        classified = classify(RuntimeError("boom"))
        assert classify(classified) is classified
        assert isinstance(classified, ClassifiedError)

    def test_severity_by_kind(self) -> None:
        assert classify(NotFoundError("x")).severity == logging.INFO
        assert classify(AuthError("x")).severity == logging.WARNING
        assert classify(RuntimeError("x")).severity == logging.ERROR

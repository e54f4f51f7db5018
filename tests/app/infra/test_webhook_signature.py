"""Testes da verificação HMAC-SHA256 de webhooks."""

from __future__ import annotations

import hashlib
import hmac
from unittest.mock import patch

import pytest

from app.infra.crypto import (
    SIGNATURE_HEADERS,
    compute_signature,
    extract_signature,
    strip_signature_prefix,
    verify_signature,
)
from app.infra.crypto import signature as signature_module


def _sign(payload: bytes, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()


def _flip_bit(hex_digest: str, byte_index: int, bit: int = 0) -> str:
    raw = bytearray(bytes.fromhex(hex_digest))
    raw[byte_index] ^= 1 << bit
    return raw.hex()


class TestExtractSignature:
    """Testes para extract_signature."""

    def test_returns_none_without_recognized_header(self) -> None:
        assert extract_signature({"content-type": "application/json"}) is None

    @pytest.mark.parametrize("header", SIGNATURE_HEADERS)
    def test_each_recognized_header(self, header: str) -> None:
        assert extract_signature({header: "abc"}) == "abc"

    def test_case_insensitive(self) -> None:
        assert extract_signature({"X-Kajabi-Signature": "abc"}) == "abc"

    def test_precedence_follows_header_order(self) -> None:
        headers = {
            "x-hub-signature-256": "hub",
            "x-signature": "generic",
            "x-webhook-signature": "webhook",
        }
        assert extract_signature(headers) == "webhook"

    def test_empty_value_falls_through(self) -> None:
        headers = {"x-webhook-signature": "", "x-signature": "generic"}
        assert extract_signature(headers) == "generic"

    def test_multi_valued_header_uses_first(self) -> None:
        assert extract_signature({"x-signature": ["first", "second"]}) == "first"


class TestVerifySignature:
    """Testes para verify_signature."""

    @pytest.mark.parametrize(
        ("payload", "secret"),
        [
            (b'{"a":1}', "shh"),
            (b"", "secret"),
            ("unicode: çãé".encode(), "another-secret"),
            (bytes(range(256)), "binary"),
        ],
    )
    def test_valid_signature(self, payload: bytes, secret: str) -> None:
        assert verify_signature(payload, _sign(payload, secret), secret) is True

    def test_sha256_prefix_is_stripped(self) -> None:
        payload = b'{"a":1}'
        assert verify_signature(payload, f"sha256={_sign(payload, 'shh')}", "shh") is True

    def test_str_payload_is_utf8_encoded(self) -> None:
        payload = '{"nome":"João"}'
        signature = _sign(payload.encode("utf-8"), "shh")
        assert verify_signature(payload, signature, "shh") is True

    @pytest.mark.parametrize("byte_index", [0, 15, 31])
    @pytest.mark.parametrize("bit", [0, 7])
    def test_any_flipped_bit_is_rejected(self, byte_index: int, bit: int) -> None:
        payload = b'{"a":1}'
        tampered = _flip_bit(_sign(payload, "shh"), byte_index, bit)
        assert verify_signature(payload, tampered, "shh") is False

    def test_wrong_secret_is_rejected(self) -> None:
        payload = b'{"a":1}'
        assert verify_signature(payload, _sign(payload, "shh"), "other") is False

    def test_uppercase_hex_is_accepted(self) -> None:
        payload = b'{"a":1}'
        assert verify_signature(payload, _sign(payload, "shh").upper(), "shh") is True

    def test_uppercase_prefix_is_accepted(self) -> None:
        payload = b'{"a":1}'
        assert verify_signature(payload, f"SHA256={_sign(payload, 'shh')}", "shh") is True

    @pytest.mark.parametrize(
        "malformed",
        ["not-hex", "zz" * 32, "abc", "sha256=", "é" * 64, "deadbeef"],
    )
    def test_malformed_signature_returns_false(self, malformed: str) -> None:
        assert verify_signature(b'{"a":1}', malformed, "shh") is False

    @pytest.mark.parametrize("separator", [" ", ":", "\n"])
    def test_separated_digest_is_rejected(self, separator: str) -> None:
        payload = b'{"a":1}'
        digest = _sign(payload, "shh")
        separated = separator.join(digest[i : i + 2] for i in range(0, len(digest), 2))

        assert verify_signature(payload, separated, "shh") is False
        assert verify_signature(payload, f"sha256={separated}", "shh") is False

    def test_digest_with_extra_digits_is_rejected(self) -> None:
        payload = b'{"a":1}'
        assert verify_signature(payload, _sign(payload, "shh") + "00", "shh") is False

    @pytest.mark.parametrize(("signature", "secret"), [(None, "shh"), ("", "shh"), ("ab", ""), ("ab", None)])
    def test_missing_inputs_return_false(self, signature: str | None, secret: str | None) -> None:
        assert verify_signature(b"{}", signature, secret) is False

    def test_uses_constant_time_comparison(self) -> None:
        payload = b'{"a":1}'
        expected = _sign(payload, "shh")
        with patch.object(
            signature_module.hmac, "compare_digest", wraps=hmac.compare_digest
        ) as compare:
            assert verify_signature(payload, expected, "shh") is True

        compare.assert_called_once()
        provided, computed = compare.call_args.args
        assert isinstance(provided, bytes)
        assert isinstance(computed, bytes)


class TestHelpers:
    """Testes para compute_signature e strip_signature_prefix."""

    def test_compute_signature_is_lowercase_hex(self) -> None:
        digest = compute_signature(b"payload", "secret")
        assert digest == _sign(b"payload", "secret")
        assert digest == digest.lower()
        assert len(digest) == 64

    def test_strip_prefix(self) -> None:
        assert strip_signature_prefix("sha256=abc") == "abc"
        assert strip_signature_prefix("  abc  ") == "abc"
        assert strip_signature_prefix("sha1=abc") == "sha1=abc"

from uuid import uuid4

import pytest

from gatepass.domain.codes import (
    SHORT_CODE_ALPHABET,
    SHORT_CODE_LENGTH,
    build_qr_data,
    generate_short_code,
    parse_code,
)
from gatepass.domain.entities import AccessMethod


def test_short_code_uses_unambiguous_alphabet():
    for _ in range(200):
        code = generate_short_code()
        assert len(code) == SHORT_CODE_LENGTH
        assert set(code) <= set(SHORT_CODE_ALPHABET)

    for confusable in "0O1I":
        assert confusable not in SHORT_CODE_ALPHABET


def test_qr_payload_embeds_invitation_and_random_secret():
    invitation_id = uuid4()

    first = build_qr_data("GATEPASS", invitation_id)
    second = build_qr_data("GATEPASS", invitation_id)

    prefix, embedded_id, secret = first.split(":")
    assert prefix == "GATEPASS"
    assert embedded_id == str(invitation_id)
    assert len(secret) >= 22
    assert first != second


def test_parse_qr_payload_is_kept_verbatim():
    payload = f"GATEPASS:{uuid4()}:AbC-123_x"

    presented = parse_code(f"  {payload}\n", "GATEPASS")

    assert presented.is_qr is True
    assert presented.value == payload
    assert presented.method == AccessMethod.qr_scan


@pytest.mark.parametrize("raw", ["abc234", " ABC234 ", "AbC234"])
def test_parse_short_code_trims_and_uppercases(raw):
    presented = parse_code(raw, "GATEPASS")

    assert presented.is_qr is False
    assert presented.value == "ABC234"
    assert presented.method == AccessMethod.manual_code


@pytest.mark.parametrize("raw", ["", "   ", "ABC23", "ABC2345", "AB-234", "OTHER:123"])
def test_parse_rejects_malformed_codes(raw):
    assert parse_code(raw, "GATEPASS") is None

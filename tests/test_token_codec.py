import base64
import json
import string

import pytest

from api.utils.auth import AuthUtils, ADMIN_TOKEN_TTL_MS, now_ms

SECRET = "unit-test-secret"


def future_claims(**extra):
    return {"role": "admin", "exp": now_ms() + 60_000, **extra}


def decode_segment(segment):
    return base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))


def test_round_trip_returns_claims_unchanged():
    claims = future_claims(note="ünïcødé")
    token = AuthUtils.sign_token(claims, SECRET)
    assert AuthUtils.verify_token(token, SECRET) == claims


def test_claims_without_expiry_are_accepted():
    token = AuthUtils.sign_token({"role": "admin"}, SECRET)
    assert AuthUtils.verify_token(token, SECRET) == {"role": "admin"}


def test_token_format_is_payload_dot_signature():
    claims = future_claims()
    token = AuthUtils.sign_token(claims, SECRET)

    payload, sig = token.split(".")
    assert "=" not in token
    assert set(token) <= set(string.ascii_letters + string.digits + "-_.")
    assert json.loads(decode_segment(payload)) == claims
    assert len(decode_segment(sig)) == 32  # sha256 digest


def test_signing_is_deterministic():
    claims = future_claims()
    assert AuthUtils.sign_token(claims, SECRET) == AuthUtils.sign_token(claims, SECRET)


def test_every_signature_character_flip_invalidates():
    token = AuthUtils.sign_token(future_claims(), SECRET)
    payload, sig = token.split(".")

    for i, ch in enumerate(sig):
        replacement = "A" if ch != "A" else "B"
        forged = f"{payload}.{sig[:i]}{replacement}{sig[i + 1:]}"
        assert AuthUtils.verify_token(forged, SECRET) is None, f"flip at {i} accepted"


def test_tampered_payload_invalidates():
    token = AuthUtils.sign_token({"role": "viewer", "exp": now_ms() + 60_000}, SECRET)
    _, sig = token.split(".")
    forged_payload = AuthUtils.sign_token({"role": "admin", "exp": now_ms() + 60_000}, SECRET).split(".")[0]
    assert AuthUtils.verify_token(f"{forged_payload}.{sig}", SECRET) is None


def test_wrong_secret_is_rejected():
    token = AuthUtils.sign_token(future_claims(), SECRET)
    assert AuthUtils.verify_token(token, "another-secret") is None


def test_expired_claims_are_rejected_despite_valid_signature():
    token = AuthUtils.sign_token({"role": "admin", "exp": now_ms() - 1}, SECRET)
    assert AuthUtils.verify_token(token, SECRET) is None


@pytest.mark.parametrize("token", [None, "", "no-delimiter", "a.b.c", ".", 42])
def test_malformed_tokens_are_rejected(token):
    assert AuthUtils.verify_token(token, SECRET) is None


def test_signed_garbage_payload_is_rejected():
    payload = base64.urlsafe_b64encode(b"not json").rstrip(b"=").decode()
    token = f"{payload}.{AuthUtils._signature(payload, SECRET)}"
    assert AuthUtils.verify_token(token, SECRET) is None


def test_signed_non_object_claims_are_rejected():
    token = AuthUtils.sign_token(["role", "admin"], SECRET)
    assert AuthUtils.verify_token(token, SECRET) is None


def test_non_numeric_expiry_is_rejected():
    token = AuthUtils.sign_token({"role": "admin", "exp": "tomorrow"}, SECRET)
    assert AuthUtils.verify_token(token, SECRET) is None


def test_issue_admin_token_expires_in_seven_days():
    before = now_ms()
    issued = AuthUtils.issue_admin_token(SECRET)
    after = now_ms()

    assert before + ADMIN_TOKEN_TTL_MS <= issued["expiresAt"] <= after + ADMIN_TOKEN_TTL_MS
    claims = AuthUtils.verify_token(issued["token"], SECRET)
    assert claims == {"role": "admin", "exp": issued["expiresAt"]}

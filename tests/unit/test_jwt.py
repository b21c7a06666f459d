"""Unit tests for token issuing and verification."""

from __future__ import annotations

import base64
from datetime import UTC, datetime, timedelta
import hashlib
import hmac
import json

from jose import jwt
import pytest

from galaxyerp.utils.jwt import InvalidTokenError, Principal, TokenService

SECRET = "unit-test-secret"


@pytest.fixture
def token_service() -> TokenService:
    return TokenService(secret=SECRET, algorithm="HS256", expire_hours=24)


def test_issue_and_decode(token_service: TokenService) -> None:
    token, expires_at = token_service.issue(user_id=7, username="alice")

    assert token_service.decode(token) == Principal(subject_id=7, username="alice")
    assert expires_at - datetime.now(UTC) > timedelta(hours=23)


def test_tampered_signature_is_rejected(token_service: TokenService) -> None:
    token, _ = token_service.issue(user_id=7, username="alice")
    header, payload, signature = token.split(".")
    tampered = ".".join([header, payload, signature[::-1]])

    with pytest.raises(InvalidTokenError):
        token_service.decode(tampered)


def test_wrong_secret_is_rejected(token_service: TokenService) -> None:
    token, _ = TokenService(secret="other-secret").issue(user_id=7, username="alice")

    with pytest.raises(InvalidTokenError):
        token_service.decode(token)


def test_expired_token_is_rejected(token_service: TokenService) -> None:
    past = datetime.now(UTC) - timedelta(hours=1)
    token = jwt.encode(
        {"user_id": 7, "username": "alice", "exp": int(past.timestamp())},
        SECRET,
        algorithm="HS256",
    )

    with pytest.raises(InvalidTokenError):
        token_service.decode(token)


@pytest.mark.parametrize(
    "claims",
    [
        {"username": "alice"},
        {"user_id": 7},
        {"user_id": "abc", "username": "alice"},
        {"user_id": True, "username": "alice"},
    ],
)
def test_missing_or_malformed_claims_are_rejected(token_service: TokenService, claims: dict) -> None:
    exp = int((datetime.now(UTC) + timedelta(hours=1)).timestamp())
    token = jwt.encode({**claims, "exp": exp}, SECRET, algorithm="HS256")

    with pytest.raises(InvalidTokenError):
        token_service.decode(token)


def test_missing_exp_is_rejected(token_service: TokenService) -> None:
    token = jwt.encode({"user_id": 7, "username": "alice"}, SECRET, algorithm="HS256")

    with pytest.raises(InvalidTokenError):
        token_service.decode(token)


def test_float_user_id_is_accepted(token_service: TokenService) -> None:
    exp = int((datetime.now(UTC) + timedelta(hours=1)).timestamp())
    token = jwt.encode({"user_id": 7.0, "username": "alice", "exp": exp}, SECRET, algorithm="HS256")

    assert token_service.decode(token).subject_id == 7


def test_non_hmac_algorithm_is_refused() -> None:
    with pytest.raises(ValueError):
        TokenService(secret=SECRET, algorithm="RS256")


def _b64(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode()


def _forge(header: dict, claims: dict, key: bytes | None) -> str:
    signing_input = f"{_b64(json.dumps(header).encode())}.{_b64(json.dumps(claims).encode())}"
    signature = b"" if key is None else hmac.new(key, signing_input.encode(), hashlib.sha256).digest()
    return f"{signing_input}.{_b64(signature)}"


def _valid_claims() -> dict:
    exp = int((datetime.now(UTC) + timedelta(hours=1)).timestamp())
    return {"user_id": 7, "username": "alice", "exp": exp}


def test_unsigned_token_is_rejected(token_service: TokenService) -> None:
    token = _forge({"alg": "none", "typ": "JWT"}, _valid_claims(), key=None)

    with pytest.raises(InvalidTokenError):
        token_service.decode(token)


def test_asymmetric_header_is_rejected(token_service: TokenService) -> None:
    # RS256 头部配合以密钥做的 HMAC 签名
    token = _forge({"alg": "RS256", "typ": "JWT"}, _valid_claims(), key=SECRET.encode())

    with pytest.raises(InvalidTokenError):
        token_service.decode(token)


def test_forged_hs256_signature_is_accepted_only_with_the_secret(token_service: TokenService) -> None:
    genuine = _forge({"alg": "HS256", "typ": "JWT"}, _valid_claims(), key=SECRET.encode())
    forged = _forge({"alg": "HS256", "typ": "JWT"}, _valid_claims(), key=b"guessed-secret")

    assert token_service.decode(genuine).subject_id == 7
    with pytest.raises(InvalidTokenError):
        token_service.decode(forged)


def test_other_hmac_algorithms_verify_under_the_same_secret(token_service: TokenService) -> None:
    token = jwt.encode(_valid_claims(), SECRET, algorithm="HS512")

    assert token_service.decode(token) == Principal(subject_id=7, username="alice")


def test_other_hmac_algorithm_with_wrong_secret_is_rejected(token_service: TokenService) -> None:
    token = jwt.encode(_valid_claims(), "other-secret", algorithm="HS512")

    with pytest.raises(InvalidTokenError):
        token_service.decode(token)


def test_non_access_token_type_is_rejected(token_service: TokenService) -> None:
    token = jwt.encode({**_valid_claims(), "type": "refresh"}, SECRET, algorithm="HS256")

    with pytest.raises(InvalidTokenError):
        token_service.decode(token)

import base64
import json
import pytest
from datetime import timedelta
from jose import jwt
from workflow_gateway.core.exceptions import InvalidCredentialError, MalformedCredentialError
from workflow_gateway.core.security import extract_token, verify_token
from conftest import TEST_SECRET, make_token

def _b64(data: dict) -> str:
    return base64.urlsafe_b64encode(json.dumps(data).encode()).rstrip(b"=").decode()

def test_extract_token():
    assert extract_token("Bearer abc.def.ghi") == "abc.def.ghi"

@pytest.mark.parametrize("header", [
    None,
    "",
    "abc.def.ghi",
    "bearer abc.def.ghi",
    "Token abc.def.ghi",
    "Bearer",
    "Bearer ",
    "Bearer abc def",
    "Bearer  abc",
])
def test_extract_token_malformed(header):
    with pytest.raises(MalformedCredentialError):
        extract_token(header)

def test_verify_token_returns_claims():
    claims = verify_token(make_token("did:alice"), TEST_SECRET)
    assert claims.did == "did:alice"
    assert claims.username == "alice"

def test_verify_token_expired():
    token = make_token("did:alice", expires_in=timedelta(minutes=-5))
    with pytest.raises(InvalidCredentialError):
        verify_token(token, TEST_SECRET)

def test_verify_token_wrong_secret():
    token = make_token("did:alice", secret="another-secret")
    with pytest.raises(InvalidCredentialError):
        verify_token(token, TEST_SECRET)

def test_verify_token_unsigned():
    token = f"{_b64({'alg': 'none', 'typ': 'JWT'})}.{_b64({'did': 'did:alice'})}."
    with pytest.raises(InvalidCredentialError):
        verify_token(token, TEST_SECRET)

def test_verify_token_garbage():
    with pytest.raises(InvalidCredentialError):
        verify_token("not-a-jwt", TEST_SECRET)

def test_verify_token_requires_did():
    token = jwt.encode({"username": "alice"}, TEST_SECRET, algorithm="HS256")
    with pytest.raises(InvalidCredentialError):
        verify_token(token, TEST_SECRET)

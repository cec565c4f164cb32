"""Unit tests for API key and user header checks (wellness/api/auth.py)"""
import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from wellness.api.auth import get_api_keys, get_request_identity, verify_api_key
from wellness.exceptions import AuthenticationError


def _bearer(key):
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=key)


def test_get_api_keys_parses_list(monkeypatch):
    monkeypatch.setenv("API_KEYS", " key-a, key-b ,,")

    assert get_api_keys() == {"key-a", "key-b"}


def test_get_api_keys_empty(monkeypatch):
    monkeypatch.delenv("API_KEYS", raising=False)

    assert get_api_keys() == frozenset()


@pytest.mark.asyncio
async def test_verify_api_key(test_env_vars, test_api_key):
    assert await verify_api_key(_bearer(test_api_key)) == test_api_key


@pytest.mark.asyncio
async def test_verify_api_key_unknown(test_env_vars):
    with pytest.raises(HTTPException) as exc_info:
        await verify_api_key(_bearer("wrong"))

    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_verify_api_key_unconfigured(monkeypatch):
    monkeypatch.delenv("API_KEYS", raising=False)

    with pytest.raises(HTTPException) as exc_info:
        await verify_api_key(_bearer("anything"))

    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_request_identity_from_header():
    identity = await get_request_identity(" api-user ")

    assert identity.current_user_id() == "api-user"


@pytest.mark.asyncio
async def test_request_identity_requires_header():
    with pytest.raises(AuthenticationError):
        await get_request_identity(None)

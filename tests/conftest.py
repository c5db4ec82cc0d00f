"""
Shared fixtures for ark_sdk tests.
"""
import base64
import json
from typing import Any, Callable, Dict, List

import httpx
import jwt
import pytest

from ark_sdk.credentials import ArkCredential, StaticAuthenticator

SIGNING_KEY = "ark-sdk-test-signing-key-0123456789abcdef"

SDK_ENV_VARS = (
    "DEPLOY_ENV",
    "ARK_DISABLE_CERTIFICATE_VERIFICATION",
    "SSL_CERT_VERIFY",
    "ARK_SDK_HTTP_TRACE",
    "ARK_SDK_CONNECT_TIMEOUT",
    "ARK_SDK_READ_TIMEOUT",
    "ARK_SDK_WRITE_TIMEOUT",
    "AWS_REGION",
    "AWS_DEFAULT_REGION",
)


def make_token(**claims: Any) -> str:
    """Signed JWT with the given claims; signatures are never verified by the SDK."""
    return jwt.encode(claims, SIGNING_KEY, algorithm="HS256")


def cookie_blob(cookies: Dict[str, str]) -> str:
    return base64.b64encode(json.dumps(cookies).encode()).decode()


class RecordingHandler:
    """Mock transport handler that records requests and replays responses."""

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response]):
        self._responder = responder
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._responder(request)


@pytest.fixture(autouse=True)
def clean_sdk_env(monkeypatch):
    """Run every test with the SDK environment variables unset."""
    for name in SDK_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def acme_token():
    return make_token(
        subdomain="acme",
        platform_domain="cyberark.cloud",
        tenant_id="tenant-123",
        unique_name="admin@acme.cyberark.cloud",
        iss="https://aax1234.id.cyberark.cloud/oauth2/platformtoken",
    )


@pytest.fixture
def acme_credential(acme_token):
    return ArkCredential(token=acme_token, username="admin@acme.cyberark.cloud")


@pytest.fixture
def isp_authenticator(acme_credential):
    return StaticAuthenticator("isp", acme_credential)


@pytest.fixture
def json_handler():
    """Handler answering every request with 200 and an empty JSON object."""
    return RecordingHandler(lambda request: httpx.Response(200, json={}))


@pytest.fixture
def sync_http(json_handler):
    client = httpx.Client(transport=httpx.MockTransport(json_handler))
    yield client
    client.close()


@pytest.fixture
def token_factory():
    return make_token


@pytest.fixture
def cookie_blob_factory():
    return cookie_blob


@pytest.fixture
def recording_handler():
    """Factory for RecordingHandler around a responder."""
    return RecordingHandler

"""Shared fixtures for pubsub_client tests."""

import json

import httpx
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from pubsub_client.auth.key import load_service_account_key
from pubsub_client.client import PubSubClient
from pubsub_client.config import PubSubSettings
from pubsub_client.models.token import utc_now
from tests.helpers.fake_pubsub import FakeClock, FakePubSubService, StaticTokenExchanger

PROJECT_ID = "test-project"
BASE_URL = "https://pubsub.test"


@pytest.fixture(scope="session")
def private_key_pem() -> str:
    """Throwaway RSA key in PKCS#8 PEM, as found in service account files."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode("ascii")


@pytest.fixture
def service_account_info(private_key_pem):
    return {
        "type": "service_account",
        "project_id": PROJECT_ID,
        "private_key_id": "key-id-1",
        "private_key": private_key_pem,
        "client_email": "publisher@test-project.iam.gserviceaccount.com",
        "client_id": "1234567890",
        "token_uri": "https://oauth2.test/token",
    }


@pytest.fixture
def key_file(tmp_path, service_account_info):
    path = tmp_path / "service-account.json"
    path.write_text(json.dumps(service_account_info))
    return path


@pytest.fixture
def service_account_key(key_file):
    return load_service_account_key(key_file)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def exchanger():
    """Token exchanger on the wall clock, which the client itself uses."""
    return StaticTokenExchanger(utc_now)


@pytest.fixture
def settings():
    return PubSubSettings(base_url=BASE_URL, refresh_margin_seconds=30)


@pytest.fixture
def fake_service():
    service = FakePubSubService(PROJECT_ID)
    service.bind("T1", "S1")
    return service


@pytest.fixture
def client(key_file, settings, fake_service, exchanger):
    """PubSubClient wired to the in-memory fake service."""
    http_client = httpx.AsyncClient(transport=fake_service.transport())
    return PubSubClient.new(
        key_file, settings=settings, http_client=http_client, exchanger=exchanger
    )

"""Fixtures for Pub/Sub emulator integration tests."""

import subprocess
import time
import uuid

import httpx
import pytest

from pubsub_client.client import PubSubClient
from pubsub_client.config import PubSubSettings
from pubsub_client.models.token import utc_now
from tests.helpers.fake_pubsub import StaticTokenExchanger

EMULATOR_PORT = 8686  # Non-default port to avoid conflicts
EMULATOR_IMAGE = "gcr.io/google.com/cloudsdktool/google-cloud-cli:emulators"
EMULATOR_URL = f"http://localhost:{EMULATOR_PORT}"
PROJECT_ID = "test-project"


@pytest.fixture(scope="session")
def pubsub_emulator():
    """Start the Pub/Sub emulator Docker container for the test session."""
    container_name = "pubsub-client-emulator-test"

    # Clean up any existing container
    subprocess.run(["docker", "rm", "-f", container_name], capture_output=True)

    subprocess.run(
        [
            "docker",
            "run",
            "-d",
            "--name",
            container_name,
            "-p",
            f"{EMULATOR_PORT}:8085",
            EMULATOR_IMAGE,
            "gcloud",
            "beta",
            "emulators",
            "pubsub",
            "start",
            f"--project={PROJECT_ID}",
            "--host-port=0.0.0.0:8085",
        ],
        check=True,
        capture_output=True,
    )

    # Wait for the emulator to accept requests
    deadline = time.monotonic() + 60
    while True:
        try:
            httpx.get(EMULATOR_URL, timeout=1.0)
            break
        except httpx.HTTPError:
            if time.monotonic() > deadline:
                raise
            time.sleep(1)

    yield EMULATOR_URL

    # Cleanup
    subprocess.run(["docker", "stop", container_name], capture_output=True)
    subprocess.run(["docker", "rm", container_name], capture_output=True)


@pytest.fixture
def topic_and_subscription(pubsub_emulator):
    """Create a unique topic with one subscription bound to it."""
    suffix = uuid.uuid4().hex[:8]
    topic = f"test-topic-{suffix}"
    subscription = f"test-subscription-{suffix}"
    topic_path = f"projects/{PROJECT_ID}/topics/{topic}"

    httpx.put(f"{pubsub_emulator}/v1/{topic_path}").raise_for_status()
    httpx.put(
        f"{pubsub_emulator}/v1/projects/{PROJECT_ID}/subscriptions/{subscription}",
        json={"topic": topic_path},
    ).raise_for_status()

    yield topic, subscription

    # Cleanup
    httpx.delete(f"{pubsub_emulator}/v1/projects/{PROJECT_ID}/subscriptions/{subscription}")
    httpx.delete(f"{pubsub_emulator}/v1/{topic_path}")


@pytest.fixture
def emulator_client(pubsub_emulator, key_file):
    """Client against the emulator; the emulator ignores bearer tokens."""
    return PubSubClient.new(
        key_file,
        settings=PubSubSettings(base_url=pubsub_emulator),
        exchanger=StaticTokenExchanger(utc_now),
    )

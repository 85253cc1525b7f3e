"""
Module: conftest.py
Description: Shared pytest fixtures for SQS manager tests.

Provides SQS queues on a moto server and managers wired to it. The
server runs in a background thread for the whole session and its state
is reset before every test; the managers reach it through endpoint_url
with their own aioboto3 clients.
"""

import boto3
import pytest
import pytest_asyncio
import requests
from moto.server import ThreadedMotoServer

from sqs_manager.models.options import ManagerOptions
from sqs_manager.sqs_queue.fifo import FifoMessageQueueManager
from sqs_manager.sqs_queue.queue_manager import QueueManager
from sqs_manager.sqs_queue.standard import StandardMessageQueueManager

REGION = "us-east-1"


@pytest.fixture(scope="session")
def moto_endpoint():
    """Start a moto server on a free local port."""
    server = ThreadedMotoServer(ip_address="127.0.0.1", port=0, verbose=False)
    server.start()
    host, port = server.get_host_and_port()
    yield f"http://{host}:{port}"
    server.stop()


@pytest.fixture
def aws_credentials(monkeypatch):
    """Fake credentials so no real AWS account is ever touched."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", REGION)


@pytest.fixture
def sqs_endpoint(moto_endpoint, aws_credentials):
    """Reset the moto server and return its URL."""
    requests.post(f"{moto_endpoint}/moto-api/reset").raise_for_status()
    return moto_endpoint


@pytest.fixture
def sqs_client(sqs_endpoint):
    """Provide a blocking boto3 SQS client for arranging test queues."""
    return boto3.client("sqs", region_name=REGION, endpoint_url=sqs_endpoint)


@pytest.fixture
def manager_options(sqs_endpoint):
    return ManagerOptions(region_name=REGION, endpoint_url=sqs_endpoint)


@pytest.fixture
def queue_url(sqs_client):
    """Create a standard test queue and return its URL."""
    return sqs_client.create_queue(QueueName="test-queue")["QueueUrl"]


@pytest.fixture
def fifo_queue_url(sqs_client):
    """Create a FIFO test queue with content-based deduplication."""
    return sqs_client.create_queue(
        QueueName="test-queue.fifo",
        Attributes={"FifoQueue": "true", "ContentBasedDeduplication": "true"}
    )["QueueUrl"]


@pytest_asyncio.fixture
async def queue_manager(manager_options):
    async with QueueManager(options=manager_options) as manager:
        yield manager


@pytest_asyncio.fixture
async def standard_manager(queue_url, manager_options):
    async with StandardMessageQueueManager(queue_url, options=manager_options) as manager:
        yield manager


@pytest_asyncio.fixture
async def fifo_manager(fifo_queue_url, manager_options):
    async with FifoMessageQueueManager(fifo_queue_url, options=manager_options) as manager:
        yield manager


@pytest.fixture
def sample_messages():
    """Provide 25 distinct message bodies."""
    return [f'{{"order_id": "{n:05d}"}}' for n in range(1, 26)]

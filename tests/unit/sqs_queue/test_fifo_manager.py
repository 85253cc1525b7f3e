"""
Module: test_fifo_manager.py
Description: Unit tests for FifoMessageQueueManager.
"""

from unittest.mock import AsyncMock

import pytest

from sqs_manager.exceptions import InvalidArgumentError, InvalidStateError
from sqs_manager.models.options import (
    FifoReceiveOptions,
    FifoSendOptions,
    ManagerOptions,
    ReceiveOptions,
    SendOptions,
)
from sqs_manager.sqs_queue.fifo import FifoMessageQueueManager

FIFO_QUEUE_URL = "https://sqs.us-east-1.amazonaws.com/123456789012/orders.fifo"


@pytest.fixture
def mock_client():
    client = AsyncMock()
    client.send_message.return_value = {"MessageId": "m", "SequenceNumber": "1"}
    client.send_message_batch.return_value = {"Successful": [], "Failed": []}
    client.receive_message.return_value = {}
    return client


@pytest.fixture
def mocked_manager(mock_client):
    return FifoMessageQueueManager(
        FIFO_QUEUE_URL,
        options=ManagerOptions(region_name="us-east-1"),
        client=mock_client
    )


class TestConstruction:
    """Test cases for FIFO manager construction."""

    def test_requires_fifo_queue(self):
        with pytest.raises(InvalidArgumentError, match="FIFO queue"):
            FifoMessageQueueManager(
                "https://sqs.us-east-1.amazonaws.com/123456789012/orders",
                client=AsyncMock()
            )

    def test_requires_valid_url(self):
        with pytest.raises(InvalidArgumentError):
            FifoMessageQueueManager("orders.fifo", client=AsyncMock())


class TestFifoSend:
    """Test cases for FIFO sends."""

    @pytest.mark.asyncio
    async def test_send_requires_group_id(self, mocked_manager, mock_client):
        with pytest.raises(InvalidStateError):
            await mocked_manager.send("hello")
        with pytest.raises(InvalidStateError):
            await mocked_manager.send("hello", FifoSendOptions())
        mock_client.send_message.assert_not_called()

    @pytest.mark.asyncio
    async def test_send_params(self, mocked_manager, mock_client):
        options = FifoSendOptions(message_group_id="orders", message_deduplication_id="order-1")
        options.add_attribute("Priority", 1)

        await mocked_manager.send("hello", options)

        kwargs = mock_client.send_message.call_args.kwargs
        assert kwargs["MessageGroupId"] == "orders"
        assert kwargs["MessageDeduplicationId"] == "order-1"
        assert kwargs["MessageAttributes"] == {"Priority": {"DataType": "Number", "StringValue": "1"}}
        assert "DelaySeconds" not in kwargs

    @pytest.mark.asyncio
    async def test_standard_options_rejected(self, mocked_manager):
        with pytest.raises(InvalidArgumentError, match="FifoSendOptions"):
            await mocked_manager.send("hello", SendOptions())

    @pytest.mark.asyncio
    async def test_send_and_receive_in_order(self, fifo_manager):
        options = FifoSendOptions(message_group_id="orders")
        for n in range(3):
            await fifo_manager.send(f"message-{n}", options)

        response = await fifo_manager.receive(FifoReceiveOptions(max_number_of_messages=10))
        assert [m["Body"] for m in response["Messages"]] == ["message-0", "message-1", "message-2"]

    @pytest.mark.asyncio
    async def test_send_many_keeps_order(self, fifo_manager, sample_messages):
        responses = await fifo_manager.send_many(sample_messages, FifoSendOptions(message_group_id="orders"))
        assert [len(r["Successful"]) for r in responses] == [10, 10, 5]

        received = []
        while True:
            response = await fifo_manager.receive(FifoReceiveOptions(max_number_of_messages=10))
            messages = response.get("Messages") or []
            if not messages:
                break
            received.extend(m["Body"] for m in messages)
            await fifo_manager.delete_batch(m["ReceiptHandle"] for m in messages)
        assert received == sample_messages


class TestFifoBatchDeduplication:
    """Test cases for per-entry deduplication ids."""

    @pytest.mark.asyncio
    async def test_generator_follows_entry_positions(self, mocked_manager, mock_client):
        options = FifoSendOptions(
            message_group_id="orders",
            batch_message_deduplication_id_generator=lambda position: f"dedup-{position}"
        )

        await mocked_manager.send_many([f"m{n}" for n in range(12)], options)

        first, second = [call.kwargs["Entries"] for call in mock_client.send_message_batch.call_args_list]
        assert [e["MessageDeduplicationId"] for e in second] == ["dedup-11", "dedup-12"]
        assert [e["Id"] for e in second] == ["Entry11", "Entry12"]
        assert all(e["MessageGroupId"] == "orders" for e in first + second)

    @pytest.mark.asyncio
    async def test_no_generator_omits_deduplication_id(self, mocked_manager, mock_client):
        await mocked_manager.send_batch(["a"], FifoSendOptions(message_group_id="orders"))

        entry = mock_client.send_message_batch.call_args.kwargs["Entries"][0]
        assert "MessageDeduplicationId" not in entry

    @pytest.mark.asyncio
    async def test_invalid_generated_id_rejected(self, mocked_manager, mock_client):
        options = FifoSendOptions(
            message_group_id="orders",
            batch_message_deduplication_id_generator=lambda position: "not valid"
        )
        with pytest.raises(InvalidArgumentError, match="message_deduplication_id"):
            await mocked_manager.send_batch(["a"], options)
        mock_client.send_message_batch.assert_not_called()


class TestFifoReceive:
    """Test cases for FIFO receives."""

    @pytest.mark.asyncio
    async def test_receive_request_attempt_id(self, mocked_manager, mock_client):
        await mocked_manager.receive(FifoReceiveOptions(receive_request_attempt_id="attempt-1"))

        kwargs = mock_client.receive_message.call_args.kwargs
        assert kwargs["ReceiveRequestAttemptId"] == "attempt-1"

    @pytest.mark.asyncio
    async def test_standard_receive_options_rejected(self, mocked_manager):
        with pytest.raises(InvalidArgumentError, match="FifoReceiveOptions"):
            await mocked_manager.receive(ReceiveOptions())

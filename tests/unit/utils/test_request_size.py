"""
Module: test_request_size.py
Description: Unit tests for serialized request size measurement.
"""

import pytest

from sqs_manager.exceptions import PayloadTooLargeError
from sqs_manager.utils.request_size import ensure_request_size, serialized_request_size

QUEUE_URL = "https://sqs.us-east-1.amazonaws.com/123456789012/test-queue"


class TestSerializedRequestSize:
    """Test cases for serialized_request_size()."""

    def test_size_exceeds_body_length(self):
        body = "x" * 1000
        size = serialized_request_size("SendMessage", {"QueueUrl": QUEUE_URL, "MessageBody": body})
        assert size > len(body)

    def test_attributes_add_to_size(self):
        params = {"QueueUrl": QUEUE_URL, "MessageBody": "hello"}
        with_attributes = dict(
            params,
            MessageAttributes={"Priority": {"DataType": "Number", "StringValue": "5"}}
        )
        assert serialized_request_size("SendMessage", with_attributes) > serialized_request_size("SendMessage", params)

    def test_binary_values_are_encoded(self):
        params = {
            "QueueUrl": QUEUE_URL,
            "MessageBody": "hello",
            "MessageAttributes": {"Blob": {"DataType": "Binary", "BinaryValue": b"\x00" * 300}},
        }
        # base64 inflates binary payloads by a third
        assert serialized_request_size("SendMessage", params) >= 400


class TestEnsureRequestSize:
    """Test cases for ensure_request_size()."""

    def test_returns_params_when_within_limit(self):
        params = {"QueueUrl": QUEUE_URL, "MessageBody": "hello"}
        assert ensure_request_size("SendMessage", params) is params

    def test_body_at_limit_overflows_with_envelope(self):
        params = {"QueueUrl": QUEUE_URL, "MessageBody": "x" * (256 * 1024)}
        with pytest.raises(PayloadTooLargeError):
            ensure_request_size("SendMessage", params)

    def test_batch_overflow(self):
        entries = [{"Id": f"Entry{n}", "MessageBody": "x" * 30000} for n in range(1, 11)]
        with pytest.raises(PayloadTooLargeError) as exc_info:
            ensure_request_size("SendMessageBatch", {"QueueUrl": QUEUE_URL, "Entries": entries})
        assert exc_info.value.actual_size > 300000

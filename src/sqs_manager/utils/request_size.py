"""
Module: request_size.py
Description: Wire size of SQS requests.

Serializes request parameters with botocore's own serializer for the SQS
service model, so the measured size is the body that would actually be
transmitted (attribute names, type tags and base64-encoded binary values
included), not just the sum of the message bodies.

Dependencies: botocore
"""

from functools import lru_cache
from typing import Any, Dict
from urllib.parse import urlencode

import botocore.session
from botocore.serialize import create_serializer

from sqs_manager.utils.validators import MAX_REQUEST_SIZE, validate_request_size


@lru_cache(maxsize=1)
def _service_model():
    return botocore.session.get_session().get_service_model('sqs')


@lru_cache(maxsize=1)
def _serializer():
    return create_serializer(_service_model().protocol, include_validation=False)


def serialized_request_size(operation_name: str, params: Dict[str, Any]) -> int:
    """
    Compute the serialized body size of a request.

    Args:
        operation_name: SQS operation name (e.g. 'SendMessageBatch')
        params: Request parameters as passed to the client

    Returns:
        Size of the serialized request body in bytes
    """
    operation_model = _service_model().operation_model(operation_name)
    request = _serializer().serialize_to_request(params, operation_model)
    body = request['body']
    if isinstance(body, dict):
        # query protocol keeps the form fields unencoded until send time
        body = urlencode(body)
    if isinstance(body, str):
        body = body.encode('utf-8')
    return len(body)


def ensure_request_size(
    operation_name: str,
    params: Dict[str, Any],
    max_bytes: int = MAX_REQUEST_SIZE
) -> Dict[str, Any]:
    """
    Validate the serialized size of a request and return the parameters.

    Raises:
        PayloadTooLargeError: If the serialized request exceeds max_bytes
    """
    validate_request_size(serialized_request_size(operation_name, params), max_bytes)
    return params

"""
Module: utils
Description: Package initialization for utility functions.

Current utilities:
- logger: Structured logging configuration and helpers
- validators: Name, identifier and size validation
- batch_helpers: Partitioning and batch entry ids
- request_size: Serialized request size measurement
"""

__all__ = []

"""
Package: config
Description: Environment-driven configuration for the SQS manager.
"""

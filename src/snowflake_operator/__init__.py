"""Kubernetes operator managing Snowflake accounts with a bounded lifetime."""

__version__ = "0.1.0"

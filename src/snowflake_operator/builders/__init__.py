"""Builders for Snowflake account resources."""

from .account import account_name_from_url, account_url, create_account_details

__all__ = ["account_name_from_url", "account_url", "create_account_details"]

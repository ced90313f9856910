"""Utility functions for the Snowflake Account Operator."""

from .conditions import set_creation_failed_condition, set_ready_condition, update_condition
from .credentials import generate_account_name, generate_admin_name, generate_password
from .duration import Clock, DurationCheck, SystemClock, check_duration, parse_duration
from .errors import sanitize_error_message, sanitize_exception

__all__ = [
    "update_condition",
    "set_ready_condition",
    "set_creation_failed_condition",
    "generate_account_name",
    "generate_admin_name",
    "generate_password",
    "Clock",
    "DurationCheck",
    "SystemClock",
    "check_duration",
    "parse_duration",
    "sanitize_error_message",
    "sanitize_exception",
]

"""Enums for the notification system."""

from enum import Enum


class Severity(str, Enum):
    """How a notification is presented."""

    DEFAULT = "default"  # Informational / success
    DESTRUCTIVE = "destructive"  # Warnings and failures

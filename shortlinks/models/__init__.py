"""
Data models for the short link registry.

This module exports the value objects shared by the store, the registry
and the API layer.
"""

from shortlinks.models.entry import DIRECT, UNKNOWN, AccessEvent, Entry
from shortlinks.models.report import ClickDetail, Report

__all__ = [
    "AccessEvent",
    "ClickDetail",
    "DIRECT",
    "Entry",
    "Report",
    "UNKNOWN",
]

"""
Common enums shared across layers.

Dependencies: enum (stdlib)
System role: Shared vocabulary for source kinds
"""

import enum


class SourceType(str, enum.Enum):
    """Kind of résumé entity a knowledge chunk was derived from."""

    BULLET_POINT = "bullet_point"
    PROJECT = "project"
    BRANCH = "branch"
    PAGE = "page"
    AUDIO_SUMMARY = "audio_summary"

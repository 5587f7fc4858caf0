from __future__ import annotations
from enum import StrEnum

class IssueCategory(StrEnum):
    # Declaration order is the report order.
    container = "container"
    video = "video"
    audio = "audio"
    subtitle = "subtitle"
    integrity = "integrity"

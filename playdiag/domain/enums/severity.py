from __future__ import annotations
from enum import StrEnum

class Severity(StrEnum):
    good = "good"
    warning = "warning"
    critical = "critical"

# playdiag/domain/entities/report.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from playdiag.domain.entities.issue import Issue
from playdiag.domain.enums.issue_category import IssueCategory
from playdiag.domain.enums.severity import Severity


@dataclass(frozen=True)
class VideoEvaluation:
    """
    Result of evaluating the playable video streams. The HDR / Dolby Vision
    flags are carried as data so the aggregator never has to re-derive them.
    """
    issues: Tuple[Issue, ...] = ()
    is_hdr: bool = False
    has_dolby_vision: bool = False
    dolby_vision_profile: Optional[int] = None


@dataclass(frozen=True)
class DiagnosticReport:
    path: str
    size_bytes: Optional[int] = None
    duration_sec: Optional[float] = None
    bitrate: Optional[int] = None
    issues: Tuple[Issue, ...] = field(default_factory=tuple)
    critical_count: int = 0
    warning_count: int = 0
    recommendations: Tuple[str, ...] = field(default_factory=tuple)
    is_hdr: bool = False
    has_dolby_vision: bool = False

    @property
    def ok(self) -> bool:
        return self.critical_count == 0

    def issues_for(self, category: IssueCategory, severity: Optional[Severity] = None) -> List[Issue]:
        return [
            i for i in self.issues
            if i.category is category and (severity is None or i.severity is severity)
        ]

    def as_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "size_bytes": self.size_bytes,
            "duration_sec": self.duration_sec,
            "bitrate": self.bitrate,
            "issues": [i.as_dict() for i in self.issues],
            "critical_count": self.critical_count,
            "warning_count": self.warning_count,
            "recommendations": list(self.recommendations),
            "is_hdr": self.is_hdr,
            "has_dolby_vision": self.has_dolby_vision,
        }

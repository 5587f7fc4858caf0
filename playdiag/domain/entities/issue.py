# playdiag/domain/entities/issue.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from playdiag.domain.enums.issue_category import IssueCategory
from playdiag.domain.enums.severity import Severity


@dataclass(frozen=True)
class Issue:
    """
    One finding. `code` is a stable machine key (e.g. "video.dolby_vision")
    that recommendation mapping keys on; `message` is for humans.
    """
    severity: Severity
    category: IssueCategory
    code: str
    message: str
    stream_index: Optional[int] = None

    @property
    def is_problem(self) -> bool:
        return self.severity is not Severity.good

    @classmethod
    def good(cls, category: IssueCategory, code: str, message: str, stream_index: Optional[int] = None) -> "Issue":
        return cls(Severity.good, category, code, message, stream_index)

    @classmethod
    def warning(cls, category: IssueCategory, code: str, message: str, stream_index: Optional[int] = None) -> "Issue":
        return cls(Severity.warning, category, code, message, stream_index)

    @classmethod
    def critical(cls, category: IssueCategory, code: str, message: str, stream_index: Optional[int] = None) -> "Issue":
        return cls(Severity.critical, category, code, message, stream_index)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "severity": str(self.severity),
            "category": str(self.category),
            "code": self.code,
            "message": self.message,
            "stream_index": self.stream_index,
        }

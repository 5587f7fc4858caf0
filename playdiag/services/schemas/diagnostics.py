# services/schemas/diagnostics.py
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from playdiag.domain.enums.issue_category import IssueCategory
from playdiag.domain.enums.severity import Severity


class DiagnosticRequest(BaseModel):
    path: str = Field(..., min_length=1, description="Absolute path to the media file",
                      examples=["/media/movies/foo.mkv"])


class IssueRead(BaseModel):
    severity: Severity
    category: IssueCategory
    code: str = Field(..., examples=["video.dolby_vision"])
    message: str
    stream_index: Optional[int] = None


class DiagnosticReportRead(BaseModel):
    path: str
    size_bytes: Optional[int] = None
    duration_sec: Optional[float] = None
    bitrate: Optional[int] = None
    ok: bool
    critical_count: int = Field(..., ge=0)
    warning_count: int = Field(..., ge=0)
    is_hdr: bool = False
    has_dolby_vision: bool = False
    issues: List[IssueRead] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)

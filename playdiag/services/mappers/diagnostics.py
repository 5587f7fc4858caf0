# playdiag/services/mappers/diagnostics.py
from __future__ import annotations

from playdiag.domain.entities.issue import Issue
from playdiag.domain.entities.report import DiagnosticReport
from playdiag.services.schemas.diagnostics import DiagnosticReportRead, IssueRead


def to_issue_read(issue: Issue) -> IssueRead:
    return IssueRead(
        severity=issue.severity,
        category=issue.category,
        code=issue.code,
        message=issue.message,
        stream_index=issue.stream_index,
    )


def to_report_read(report: DiagnosticReport) -> DiagnosticReportRead:
    return DiagnosticReportRead(
        path=report.path,
        size_bytes=report.size_bytes,
        duration_sec=report.duration_sec,
        bitrate=report.bitrate,
        ok=report.ok,
        critical_count=report.critical_count,
        warning_count=report.warning_count,
        is_hdr=report.is_hdr,
        has_dolby_vision=report.has_dolby_vision,
        issues=[to_issue_read(i) for i in report.issues],
        recommendations=list(report.recommendations),
    )

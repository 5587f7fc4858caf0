from playdiag.services.schemas.diagnostics import (
    DiagnosticRequest,
    DiagnosticReportRead,
    IssueRead,
)
__all__ = [
    "DiagnosticRequest",
    "DiagnosticReportRead",
    "IssueRead",
]

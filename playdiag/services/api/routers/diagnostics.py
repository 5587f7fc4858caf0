# playdiag/services/api/routers/diagnostics.py
from __future__ import annotations
from http import HTTPStatus

from fastapi import APIRouter, Depends, HTTPException

from playdiag.common.settings import get_settings
from playdiag.domain.errors import (
    AnalysisCancelled,
    DiagnosticError,
    InputNotFound,
    IntegrityCheckError,
    IntegrityCheckTimeout,
    ProbeParseError,
    ProbeUnavailable,
)
from playdiag.services.api.deps import get_diagnostic_service
from playdiag.services.diagnostics.service import DiagnosticService
from playdiag.services.mappers.diagnostics import to_report_read
from playdiag.services.schemas.diagnostics import DiagnosticReportRead, DiagnosticRequest

cfg = get_settings()
router = APIRouter(prefix=f"{cfg.api.prefix}/diagnostics", tags=["diagnostics"])

_STATUS = (
    (InputNotFound, HTTPStatus.NOT_FOUND),
    (ProbeParseError, HTTPStatus.UNPROCESSABLE_ENTITY),
    (ProbeUnavailable, HTTPStatus.BAD_GATEWAY),
    (IntegrityCheckTimeout, HTTPStatus.GATEWAY_TIMEOUT),
    (IntegrityCheckError, HTTPStatus.BAD_GATEWAY),
    (AnalysisCancelled, HTTPStatus.CONFLICT),
)


def _status_for(err: DiagnosticError) -> HTTPStatus:
    for cls, status in _STATUS:
        if isinstance(err, cls):
            return status
    return HTTPStatus.INTERNAL_SERVER_ERROR


@router.post("", response_model=DiagnosticReportRead)
def diagnose(
    payload: DiagnosticRequest,
    svc: DiagnosticService = Depends(get_diagnostic_service),
) -> DiagnosticReportRead:
    try:
        report = svc.analyze(payload.path)
    except DiagnosticError as e:
        raise HTTPException(status_code=_status_for(e), detail=e.message) from e
    return to_report_read(report)

# playdiag/domain/policies/integrity_rules.py
from __future__ import annotations

from typing import List

from playdiag.domain.entities.frames import DecodeValidation
from playdiag.domain.entities.issue import Issue
from playdiag.domain.enums.issue_category import IssueCategory

INTEGRITY = IssueCategory.integrity


def evaluate_integrity(validation: DecodeValidation) -> List[Issue]:
    """One Critical per captured decoder error, then a summary Critical."""
    window = validation.window_sec
    if validation.clean:
        return [Issue.good(INTEGRITY, "integrity.ok", f"No decode errors in the first {window}s")]

    out = [Issue.critical(INTEGRITY, "integrity.decode_error", f"Decode error: {line}") for line in validation.error_lines]
    n = len(validation.error_lines)
    out.append(Issue.critical(
        INTEGRITY, "integrity.failed",
        f"Decode validation failed in the first {window}s (exit status {validation.exit_status}, "
        f"{n} error line{'s' if n != 1 else ''})",
    ))
    return out

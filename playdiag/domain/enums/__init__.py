from playdiag.domain.enums.severity import Severity
from playdiag.domain.enums.issue_category import IssueCategory
from playdiag.domain.enums.stream_kind import StreamKind
from playdiag.domain.enums.picture_type import PictureType
__all__ = [
    "Severity",
    "IssueCategory",
    "StreamKind",
    "PictureType",
]

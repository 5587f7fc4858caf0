# playdiag/domain/entities/frames.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from playdiag.domain.enums.picture_type import PictureType


@dataclass(frozen=True)
class FrameSample:
    """Decoded-frame descriptor; only used for GOP estimation."""
    pict_type: PictureType
    stream_index: int
    ordinal: int


@dataclass(frozen=True)
class DecodeValidation:
    """
    Outcome of a bounded decode pass over the first `window_sec` seconds.
    `error_lines` are the decoder's captured error output, already trimmed.
    """
    exit_status: int
    error_lines: Tuple[str, ...] = field(default_factory=tuple)
    window_sec: int = 60

    @property
    def clean(self) -> bool:
        return self.exit_status == 0 and not self.error_lines

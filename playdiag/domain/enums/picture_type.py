from __future__ import annotations
from enum import StrEnum

class PictureType(StrEnum):
    I = "I"
    P = "P"
    B = "B"

from __future__ import annotations
from pathlib import Path
from typing import List, Protocol

class SidecarListerPort(Protocol):
    def list_matching(self, directory: Path, base_name: str) -> List[str]: ...

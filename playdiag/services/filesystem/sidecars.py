from __future__ import annotations

from pathlib import Path
from typing import List

from playdiag.domain.ports.sidecars import SidecarListerPort


class LocalSidecarLister(SidecarListerPort):
    """
    Local filesystem implementation for SidecarListerPort.
    Only looks at the one directory it is given; never recurses.
    """

    def list_matching(self, directory: Path, base_name: str) -> List[str]:
        d = Path(directory)
        if not d.is_dir():
            return []
        stem = Path(base_name).stem
        names = [
            p.name for p in d.iterdir()
            if p.is_file() and (p.name.startswith(f"{stem}.") or p.stem == stem)
        ]
        return sorted(names)

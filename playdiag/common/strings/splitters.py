from typing import List, Tuple

def csv_to_list(v: str | List[str] | None) -> List[str]:
    if v is None:
        return []
    if isinstance(v, list):
        return [s.strip() for s in v if s and str(s).strip()]
    return [s.strip() for s in str(v).split(",") if s.strip()]

def csv_to_tags(v: str | None) -> Tuple[str, ...]:
    """'matroska,webm' -> ('matroska', 'webm'); lowercased, order kept, dupes dropped."""
    seen: List[str] = []
    for tag in csv_to_list(v):
        t = tag.lower()
        if t not in seen:
            seen.append(t)
    return tuple(seen)

"""
Case Identifiers

Cases are named by hierarchical paths such as
``"Abdomen/CT Abdomen Contrast/case_001"`` (region / protocol / case).
"""

from typing import Tuple


def normalize_case_id(case_id: str) -> str:
    """Strip whitespace and surrounding slashes; empty means no case."""
    if not case_id:
        return ""
    parts = [part.strip() for part in case_id.strip().strip("/").split("/")]
    return "/".join(part for part in parts if part)


def split_case_id(case_id: str) -> Tuple[str, ...]:
    """Split a case id into its path parts."""
    normalized = normalize_case_id(case_id)
    return tuple(normalized.split("/")) if normalized else ()


def case_label(case_id: str) -> str:
    """Short label for a case (its last path part)."""
    parts = split_case_id(case_id)
    return parts[-1] if parts else ""

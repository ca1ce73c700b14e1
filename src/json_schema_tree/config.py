"""TreeConfig and SortOrder for tree construction and presentation.

TreeConfig is a frozen (immutable) dataclass holding the engine parameters.
SortOrder selects the direction of the shared sibling comparator.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum, auto


class SortOrder(StrEnum):
    """Direction of the label comparator used for sorted sibling lists.

    - ASCENDING:  "a" before "b".
    - DESCENDING: "b" before "a".
    """

    ASCENDING = auto()
    DESCENDING = auto()


@dataclass(frozen=True, slots=True)
class TreeConfig:
    """Immutable configuration for a TreeStore.

    Attributes:
        key_field: Property path identifying a record across refreshes.  Used
            by ``populate`` when the caller passes no key field.  An empty
            string disables change tracking.
        sort_order: Direction of the sibling comparator.
        filter_case_sensitive: When True, filter text is matched
            case-sensitively.  Default False.
        hide_empty_roots: When True, root nodes whose schema declares children
            but which currently own none are not returned by ``get_children``.
        approval_threshold: Number of distinct review categories required
            before the built-in ``overallScore`` icon reports the minimum
            score instead of ``"verified"``.
    """

    key_field: str = "number"
    sort_order: SortOrder = SortOrder.ASCENDING
    filter_case_sensitive: bool = False
    hide_empty_roots: bool = True
    approval_threshold: int = 2

    def __post_init__(self) -> None:
        if self.key_field and not self.key_field.strip(". "):
            msg = f"key_field must name a property path, got {self.key_field!r}"
            raise ValueError(msg)
        if not isinstance(self.sort_order, SortOrder):
            msg = f"sort_order must be a SortOrder, got {self.sort_order!r}"
            raise ValueError(msg)
        if self.approval_threshold < 0:
            msg = f"approval_threshold must be >= 0, got {self.approval_threshold}"
            raise ValueError(msg)

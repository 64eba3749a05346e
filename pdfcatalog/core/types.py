from __future__ import annotations
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Literal, Optional, Tuple

from .errors import InvalidInput

Position = Literal["left", "right", "outside", "inside", "none"]
BlankRule = Literal["entry_parity", "running_parity"]

POSITIONS: Tuple[str, ...] = ("left", "right", "outside", "inside", "none")
BLANK_RULES: Tuple[str, ...] = ("entry_parity", "running_parity")

@dataclass(frozen=True)
class DocumentEntry:
    id: int
    title: str
    page_count: int
    source: Optional[str] = None  # path of the uploaded PDF

@dataclass
class LayoutOptions:
    insert_empty_pages: bool = True         # blank page after odd-count documents
    add_page_numbers: bool = True
    page_number_position: Position = "outside"
    toc_title: str = "Table of Contents"
    blank_rule: BlankRule = "entry_parity"

    # stamping, in PDF points
    number_margin_x: float = 50
    number_offset_y: float = 30
    number_font_size: float = 12

    def __post_init__(self):
        if self.page_number_position not in POSITIONS:
            raise InvalidInput(f"Unknown page number position: {self.page_number_position}")
        if self.blank_rule not in BLANK_RULES:
            raise InvalidInput(f"Unknown blank page rule: {self.blank_rule}")
        for name in ("insert_empty_pages", "add_page_numbers"):
            if not isinstance(getattr(self, name), bool):
                raise InvalidInput(f"{name} must be true or false, got {getattr(self, name)!r}")

    @property
    def stamps_numbers(self) -> bool:
        return self.add_page_numbers and self.page_number_position != "none"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LayoutOptions":
        if not isinstance(data, dict):
            raise InvalidInput(f"Options must be an object, got {type(data).__name__}")
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

@dataclass(frozen=True)
class PaginationPlan:
    start_pages: Tuple[int, ...]
    blank_after: Tuple[bool, ...]
    total_pages: int

@dataclass(frozen=True)
class PageRef:
    entry_index: int
    pdf_page_index: Optional[int] = None
    is_blank: bool = False

@dataclass(frozen=True)
class CatalogEntry:
    title: str
    start_page: int

@dataclass
class Catalog:
    title: str
    entries: List[CatalogEntry] = field(default_factory=list)

    def to_context(self) -> Dict[str, Any]:
        """Data object handed to the DOCX template."""
        return {
            "title": self.title,
            "entries": [{"title": e.title, "page": e.start_page} for e in self.entries],
        }

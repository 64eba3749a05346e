from __future__ import annotations
import fitz  # PyMuPDF
from PIL import Image

from .types import LayoutOptions
from .errors import InvalidInput, UserFacingError
from .placement import page_number_anchor

NUMBER_FONT = "helv"  # Helvetica, built into every PDF viewer
NUMBER_COLOR = (0, 0, 0)

def open_pdf_checked(path: str) -> fitz.Document:
    try:
        doc = fitz.open(path)
    except Exception:
        raise InvalidInput(f"Cannot open PDF: {path}")
    if not doc.is_pdf:
        doc.close()
        raise InvalidInput(f"Not a PDF: {path}")
    if doc.needs_pass or doc.is_encrypted:
        doc.close()
        raise InvalidInput(f"Password-protected PDFs are not supported: {path}")
    if doc.page_count <= 0:
        doc.close()
        raise InvalidInput(f"PDF has no pages: {path}")
    return doc

def count_pages(path: str) -> int:
    doc = open_pdf_checked(path)
    try:
        return doc.page_count
    finally:
        doc.close()

def stamp_page_numbers(doc: fitz.Document, options: LayoutOptions) -> int:
    """Draw "1", "2", ... on every page. Returns the number of pages stamped."""
    if not options.stamps_numbers:
        return 0
    stamped = 0
    for index, page in enumerate(doc):
        rect = page.rect
        anchor = page_number_anchor(
            index,
            options.page_number_position,
            rect.width,
            margin_x=options.number_margin_x,
            offset_y=options.number_offset_y,
        )
        if anchor is None:
            continue
        x, y = anchor
        # anchor y is from the bottom edge, PyMuPDF measures from the top
        point = fitz.Point(x, rect.height - y) * page.derotation_matrix
        page.insert_text(
            point,
            str(index + 1),
            fontsize=options.number_font_size,
            fontname=NUMBER_FONT,
            color=NUMBER_COLOR,
            rotate=page.rotation,
        )
        stamped += 1
    return stamped

def render_page_preview(pdf_path: str, page_index: int, dpi: int = 110) -> Image.Image:
    doc = open_pdf_checked(pdf_path)
    try:
        if not (0 <= page_index < doc.page_count):
            raise UserFacingError(f"Page {page_index + 1} does not exist (document has {doc.page_count} pages)")
        page = doc.load_page(page_index)
        mat = fitz.Matrix(dpi / 72.0, dpi / 72.0)
        pix = page.get_pixmap(matrix=mat, alpha=False)
        return Image.frombytes("RGB", (pix.width, pix.height), pix.samples)
    finally:
        doc.close()

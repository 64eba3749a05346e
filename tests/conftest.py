import io
import os

import fitz  # PyMuPDF
import pytest
from docx import Document

A4 = (595, 842)

@pytest.fixture
def make_pdf(tmp_path):
    """Write a PDF with `pages` pages, each carrying the word "<name>-p<n>"."""
    def _make(name: str, pages: int, size=A4) -> str:
        path = os.path.join(str(tmp_path), f"{name}.pdf")
        doc = fitz.open()
        for i in range(pages):
            page = doc.new_page(width=size[0], height=size[1])
            page.insert_text((72, 100), f"{name}-p{i + 1}", fontsize=14)
        doc.save(path)
        doc.close()
        return path
    return _make

@pytest.fixture
def template_bytes():
    doc = Document()
    doc.add_paragraph("{{ title }}")
    doc.add_paragraph("{% for e in entries %}{{ e.title }}:{{ e.page }};{% endfor %}")
    buf = io.BytesIO()
    doc.save(buf)
    return buf.getvalue()

@pytest.fixture
def template_path(tmp_path, template_bytes):
    path = tmp_path / "toc_template.docx"
    path.write_bytes(template_bytes)
    return str(path)

def docx_text(data: bytes) -> str:
    return "\n".join(p.text for p in Document(io.BytesIO(data)).paragraphs)

def page_words(page) -> list:
    return [w[4] for w in page.get_text("words")]

from __future__ import annotations
import io
import logging
import os
from typing import Sequence, Union

from docxtpl import DocxTemplate

from .types import Catalog, CatalogEntry, DocumentEntry, LayoutOptions
from .errors import ExternalToolFailure, InvalidInput, MissingTemplate, UserFacingError, is_docx
from .plan import plan_pages

logger = logging.getLogger(__name__)

Template = Union[bytes, str, None]

def build_catalog(entries: Sequence[DocumentEntry], options: LayoutOptions) -> Catalog:
    # always recomputed: entries may have been renamed or reordered since the last call
    plan = plan_pages([e.page_count for e in entries], options.insert_empty_pages, options.blank_rule)
    return Catalog(
        title=options.toc_title,
        entries=[CatalogEntry(title=e.title, start_page=p) for e, p in zip(entries, plan.start_pages)],
    )

def load_template(template: Template) -> bytes:
    if template is None or template == b"" or template == "":
        raise MissingTemplate("No DOCX template loaded. Load a template before generating the content page.")
    if isinstance(template, bytes):
        return template
    if not is_docx(template):
        raise InvalidInput(f"Template must be a .docx file: {template}")
    if not os.path.isfile(template):
        raise MissingTemplate(f"Template not found: {template}")
    with open(template, "rb") as f:
        return f.read()

def render_catalog_docx(template: Template, catalog: Catalog) -> bytes:
    """Render the table of contents into a DOCX template.

    The template sees `title` and `entries` (each with `title` and `page`), e.g.
    {{ title }} ... {% for e in entries %}{{ e.title }} {{ e.page }}{% endfor %}
    """
    data = load_template(template)
    try:
        doc = DocxTemplate(io.BytesIO(data))
        doc.render(catalog.to_context(), autoescape=True)
        out = io.BytesIO()
        doc.save(out)
    except UserFacingError:
        raise
    except Exception as e:
        logger.exception("DOCX template rendering failed")
        raise ExternalToolFailure("Could not generate the content page from the template.") from e
    return out.getvalue()

from __future__ import annotations
import itertools, json, logging, os, shutil
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

import fitz  # PyMuPDF

from .types import Catalog, DocumentEntry, LayoutOptions, PageRef, PaginationPlan
from .errors import (
    ExternalToolFailure, InvalidInput, UserFacingError,
    is_pdf, title_from_filename,
)
from .registry import EntryRegistry
from .plan import plan_pages, build_page_sequence, blank_pages_contributed
from .catalog import Template, build_catalog, render_catalog_docx
from .render import open_pdf_checked, count_pages, stamp_page_numbers

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_PDF = "merged_document_with_catalog.pdf"
DEFAULT_OUTPUT_DOCX = "generated_document.docx"

GENERIC_FAILURE = "An error occurred while generating the document. Please check the input files and try again."

@dataclass
class AssemblyResult:
    plan: PaginationPlan
    catalog: Optional[Catalog]
    output_pdf: Optional[str]
    output_docx: Optional[str] = None

def load_entries(registry: EntryRegistry, paths: Sequence[str], titles: Optional[Sequence[Optional[str]]] = None) -> List[int]:
    """Register uploaded PDFs, one or many. Every file is checked before any is added."""
    specs = []
    for i, path in enumerate(paths):
        if not path or not os.path.isfile(path):
            raise InvalidInput(f"File does not exist: {path}")
        if not is_pdf(path):
            raise InvalidInput(f"Only PDF files can be merged: {path}")
        title = titles[i] if titles and i < len(titles) and titles[i] else title_from_filename(path)
        specs.append((title, count_pages(path), path))
    return registry.extend(specs)

def _write_atomically(output_path: str, write: Callable[[str], None]) -> None:
    out_dir = os.path.dirname(os.path.abspath(output_path)) or os.getcwd()
    os.makedirs(out_dir, exist_ok=True)
    tmp_path = os.path.join(out_dir, f".tmp_{os.path.basename(output_path)}")
    try:
        write(tmp_path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise
    shutil.move(tmp_path, output_path)

def _write_docx(output_docx: str, data: bytes) -> None:
    def _write(tmp_path: str):
        with open(tmp_path, "wb") as f:
            f.write(data)
    try:
        _write_atomically(output_docx, _write)
    except OSError as e:
        logger.exception("Writing %s failed", output_docx)
        raise ExternalToolFailure(GENERIC_FAILURE) from e

def _copy_entry_pages(doc_out: fitz.Document, src: fitz.Document, refs: List[PageRef]) -> None:
    """Append one entry's slice of the page sequence: runs of source pages, then blanks."""
    for is_blank, run in itertools.groupby(refs, key=lambda r: r.is_blank):
        run = list(run)
        if is_blank:
            first = src[0].rect
            for _ in run:
                doc_out.new_page(width=first.width, height=first.height)
        else:
            doc_out.insert_pdf(src, from_page=run[0].pdf_page_index, to_page=run[-1].pdf_page_index)

def merge_pdf(
    entries: Sequence[DocumentEntry],
    options: LayoutOptions,
    output_pdf: str,
    progress_cb: Optional[Callable[[int, int], None]] = None,
    log_cb: Optional[Callable[[str], None]] = None,
) -> PaginationPlan:
    entries = tuple(entries)
    if not entries:
        raise InvalidInput("No PDF files to merge.")
    counts = [e.page_count for e in entries]
    plan = plan_pages(counts, options.insert_empty_pages, options.blank_rule)
    sequence = build_page_sequence(counts, plan)

    def _log(msg: str):
        logger.debug(msg)
        if log_cb:
            log_cb(msg)

    _log(f"Merging {len(entries)} file(s): {plan.total_pages} pages, {blank_pages_contributed(plan)} blank")

    def _write(tmp_path: str):
        doc_out = fitz.open()
        try:
            total = len(entries)
            for entry_index, refs in itertools.groupby(sequence, key=lambda r: r.entry_index):
                entry = entries[entry_index]
                i = entry_index + 1
                if not entry.source:
                    raise InvalidInput(f"No source file for \"{entry.title}\"")
                src = open_pdf_checked(entry.source)
                try:
                    if src.page_count != entry.page_count:
                        raise InvalidInput(
                            f"{entry.source} now has {src.page_count} pages, expected {entry.page_count}. Add it again."
                        )
                    _copy_entry_pages(doc_out, src, list(refs))
                finally:
                    src.close()
                expected = plan.start_pages[i] - 1 if i < total else plan.total_pages
                if doc_out.page_count != expected:
                    raise ExternalToolFailure(
                        f"Merged document has {doc_out.page_count} pages after \"{entry.title}\", which does not match the plan"
                    )
                if progress_cb:
                    progress_cb(i, total)
                _log(f"{i}/{total} {entry.title}: starts at page {plan.start_pages[entry_index]}")

            stamped = stamp_page_numbers(doc_out, options)
            if stamped:
                _log(f"Page numbers added ({options.page_number_position})")
            doc_out.save(tmp_path, garbage=3, deflate=True)
        finally:
            doc_out.close()

    try:
        _write_atomically(output_pdf, _write)
    except UserFacingError:
        raise
    except Exception as e:
        logger.exception("PDF merge failed")
        raise ExternalToolFailure(GENERIC_FAILURE) from e
    return plan

def generate_catalog(
    entries: Sequence[DocumentEntry],
    options: LayoutOptions,
    template: Template,
    output_docx: str,
) -> Catalog:
    """Write the content page on its own, without merging."""
    catalog = build_catalog(entries, options)
    _write_docx(output_docx, render_catalog_docx(template, catalog))
    return catalog

def assemble(
    registry: EntryRegistry,
    options: LayoutOptions,
    output_pdf: Optional[str],
    template: Template = None,
    output_docx: Optional[str] = None,
    progress_cb: Optional[Callable[[int, int], None]] = None,
    log_cb: Optional[Callable[[str], None]] = None,
) -> AssemblyResult:
    """Merge the registry's files and, if output_docx is given, render the content page.

    With output_pdf None only the content page is written. Works on a snapshot
    taken up front; edits to the registry during the run are not seen. On
    failure no output file is left behind.
    """
    entries = registry.snapshot()
    if output_pdf is None and output_docx is None:
        raise InvalidInput("Nothing to generate: give an output PDF or an output DOCX.")

    catalog = None
    docx_data = None
    if output_docx is not None:
        # rendered before the merge so a bad template fails before any file is touched
        catalog = build_catalog(entries, options)
        docx_data = render_catalog_docx(template, catalog)

    if output_pdf is not None:
        plan = merge_pdf(entries, options, output_pdf, progress_cb=progress_cb, log_cb=log_cb)
    else:
        plan = plan_pages([e.page_count for e in entries], options.insert_empty_pages, options.blank_rule)
    result = AssemblyResult(plan=plan, catalog=catalog, output_pdf=output_pdf)

    if output_docx is not None:
        try:
            _write_docx(output_docx, docx_data)
        except UserFacingError:
            if output_pdf is not None and os.path.exists(output_pdf):
                os.remove(output_pdf)
            raise
        result.output_docx = output_docx
        if log_cb:
            log_cb(f"Content page written: {output_docx}")
    return result

def _read_manifest(manifest_path: str) -> Dict:
    try:
        with open(manifest_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise InvalidInput(f"Cannot read manifest {manifest_path}: {e}")

    if not isinstance(data, dict):
        raise InvalidInput("Manifest must be a JSON object")
    items = data.get("items", [])
    if not isinstance(items, list) or not all(isinstance(it, dict) for it in items):
        raise InvalidInput("Manifest \"items\" must be a list of objects")
    if not isinstance(data.get("options", {}), dict):
        raise InvalidInput("Manifest \"options\" must be an object")
    for key in ("output_pdf", "output_docx", "template"):
        if data.get(key) is not None and not isinstance(data[key], str):
            raise InvalidInput(f"Manifest \"{key}\" must be a path")
    return data

def run_job_from_manifest(
    manifest_path: str,
    log_cb: Optional[Callable[[str], None]] = None,
    catalog_only: bool = False,
) -> AssemblyResult:
    """Run a JSON job. Without "output_pdf" but with a template, only the content page is made."""
    data = _read_manifest(manifest_path)
    base_dir = os.path.dirname(os.path.abspath(manifest_path))

    def _resolve(p: Optional[str]) -> Optional[str]:
        if not p:
            return p
        return p if os.path.isabs(p) else os.path.join(base_dir, p)

    items: List[Dict] = data.get("items", [])
    registry = EntryRegistry()
    load_entries(
        registry,
        [_resolve(it.get("path")) for it in items],
        titles=[it.get("title") for it in items],
    )
    options = LayoutOptions.from_dict(data.get("options", {}))
    output_docx = _resolve(data.get("output_docx"))
    template = _resolve(data.get("template"))
    if (template or catalog_only) and output_docx is None:
        output_docx = os.path.join(base_dir, DEFAULT_OUTPUT_DOCX)

    if catalog_only or (data.get("output_pdf") is None and template):
        output_pdf = None
    else:
        output_pdf = _resolve(data.get("output_pdf") or DEFAULT_OUTPUT_PDF)

    return assemble(
        registry,
        options,
        output_pdf,
        template=template,
        output_docx=output_docx,
        log_cb=log_cb,
    )

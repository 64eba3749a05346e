import argparse
import logging
from pdfcatalog.core.engine import run_job_from_manifest
from pdfcatalog.core.errors import UserFacingError
from pdfcatalog.core.render import render_page_preview

def main(argv=None):
    ap = argparse.ArgumentParser(prog="pdfcatalog", description="Merge PDFs with page numbers and a DOCX content page")
    ap.add_argument("--manifest", required=True)
    ap.add_argument("--catalog-only", action="store_true", help="only render the content page DOCX, do not merge")
    ap.add_argument("--preview", metavar="PNG", help="also save one page of the merged PDF as an image")
    ap.add_argument("--preview-page", type=int, default=1, metavar="N")
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        result = run_job_from_manifest(
            args.manifest,
            log_cb=print if args.verbose else None,
            catalog_only=args.catalog_only,
        )
        if args.preview and result.output_pdf:
            render_page_preview(result.output_pdf, args.preview_page - 1).save(args.preview)
        print("OK")
    except UserFacingError as e:
        print(f"ERROR: {e}")
        raise SystemExit(2)

if __name__ == "__main__":
    main()

import json

import pytest

from pdfcatalog.cli.main import main

def test_cli_ok(make_pdf, tmp_path, capsys):
    make_pdf("a", 3)
    manifest = tmp_path / "job.json"
    manifest.write_text(json.dumps({"items": [{"path": "a.pdf"}], "output_pdf": "merged.pdf"}))
    preview = tmp_path / "p.png"
    main(["--manifest", str(manifest), "--preview", str(preview), "--preview-page", "2"])
    assert capsys.readouterr().out.strip().endswith("OK")
    assert (tmp_path / "merged.pdf").exists()
    assert preview.exists()

def test_cli_error(tmp_path, capsys):
    manifest = tmp_path / "job.json"
    manifest.write_text(json.dumps({"items": [{"path": "missing.pdf"}]}))
    with pytest.raises(SystemExit) as exc:
        main(["--manifest", str(manifest)])
    assert exc.value.code == 2
    assert capsys.readouterr().out.startswith("ERROR:")

def test_cli_catalog_only(make_pdf, tmp_path, template_path, capsys):
    make_pdf("a", 2)
    manifest = tmp_path / "job.json"
    manifest.write_text(json.dumps({"items": [{"path": "a.pdf"}], "template": template_path}))
    main(["--manifest", str(manifest), "--catalog-only", "--preview", str(tmp_path / "p.png")])
    assert capsys.readouterr().out.strip().endswith("OK")
    assert (tmp_path / "generated_document.docx").exists()
    assert not (tmp_path / "merged_document_with_catalog.pdf").exists()
    assert not (tmp_path / "p.png").exists()

def test_cli_manifest_not_an_object(tmp_path, capsys):
    manifest = tmp_path / "job.json"
    manifest.write_text("[1, 2]")
    with pytest.raises(SystemExit) as exc:
        main(["--manifest", str(manifest)])
    assert exc.value.code == 2
    assert capsys.readouterr().out.startswith("ERROR:")

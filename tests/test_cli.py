from __future__ import annotations

import json

from PIL import Image

from favicon_kit.cli import main


def test_build_command_writes_output(make_source, tmp_path) -> None:
    manifest_path = tmp_path / "manifest.json"
    manifest_path.write_text(json.dumps({"name": "demo"}), encoding="utf-8")
    out = tmp_path / "dist"
    module_out = tmp_path / "favicon.js"

    code = main(
        [
            "build",
            "--path",
            str(make_source(512)),
            "--webmanifest",
            str(manifest_path),
            "--out",
            str(out),
            "--module-out",
            str(module_out),
        ]
    )

    assert code == 0
    assert (out / "favicon.ico").is_file()
    manifests = list((out / "assets").glob("site-*.webmanifest"))
    assert len(manifests) == 1
    assert json.loads(manifests[0].read_text(encoding="utf-8"))["name"] == "demo"
    assert "export const favicon_sizes" in module_out.read_text(encoding="utf-8")


def test_build_command_reports_config_error(make_source, tmp_path) -> None:
    code = main(["build", "--path", str(make_source(100, 200)), "--out", str(tmp_path / "dist")])
    assert code == 1
    assert not (tmp_path / "dist").exists()


def test_build_command_oversized_source_exits_cleanly(make_source, tmp_path, monkeypatch) -> None:
    path = make_source(64)
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
    code = main(["build", "--path", str(path), "--out", str(tmp_path / "dist")])
    assert code == 1

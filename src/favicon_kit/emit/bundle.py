from __future__ import annotations

import hashlib
import logging
import posixpath
from dataclasses import dataclass
from pathlib import Path
from uuid import uuid4

logger = logging.getLogger(__name__)


@dataclass
class OutputAsset:
    file_name: str
    source: bytes | str
    name: str | None = None


@dataclass
class _Emitted:
    source: bytes | str
    name: str | None
    file_name: str | None


def _as_bytes(source: bytes | str) -> bytes:
    return source.encode("utf-8") if isinstance(source, str) else source


class AssetBundle:
    """
    Build-mode asset pipeline.

    Assets are emitted with either a logical `name` (final file name becomes
    `<assets_dir>/<stem>-<hash><ext>`) or a fixed `file_name`. Final names are
    only known after `finalize()`.
    """

    def __init__(self, assets_dir: str = "assets", hash_length: int = 8) -> None:
        self.assets_dir = assets_dir.strip("/")
        self.hash_length = hash_length
        self._emitted: dict[str, _Emitted] = {}
        self._file_names: dict[str, str] = {}
        self.output: dict[str, OutputAsset] = {}
        self.finalized = False

    def emit_asset(self, *, source: bytes | str, name: str | None = None, file_name: str | None = None) -> str:
        if self.finalized:
            raise RuntimeError("cannot emit assets after the bundle is finalized")
        if not name and not file_name:
            raise ValueError("emit_asset requires name or file_name")
        ref_id = uuid4().hex[:8]
        self._emitted[ref_id] = _Emitted(source=source, name=name, file_name=file_name)
        return ref_id

    def get_file_name(self, ref_id: str) -> str:
        if not self.finalized:
            raise RuntimeError("file names are assigned when the bundle is finalized")
        return self._file_names[ref_id]

    def _hashed_file_name(self, name: str, source: bytes | str) -> str:
        digest = hashlib.sha256(_as_bytes(source)).hexdigest()[: self.hash_length]
        stem, ext = posixpath.splitext(posixpath.basename(name))
        file_name = f"{stem}-{digest}{ext}"
        return posixpath.join(self.assets_dir, file_name) if self.assets_dir else file_name

    def finalize(self) -> dict[str, OutputAsset]:
        if self.finalized:
            return self.output
        for ref_id, emitted in self._emitted.items():
            file_name = emitted.file_name or self._hashed_file_name(emitted.name or "", emitted.source)
            self._file_names[ref_id] = file_name
            self.output[file_name] = OutputAsset(file_name=file_name, source=emitted.source, name=emitted.name)
        self.finalized = True
        return self.output

    def write(self, out_dir: Path) -> list[Path]:
        if not self.finalized:
            self.finalize()
        written: list[Path] = []
        for file_name, asset in sorted(self.output.items()):
            path = out_dir / file_name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(_as_bytes(asset.source))
            logger.info("wrote %s", path)
            written.append(path)
        return written

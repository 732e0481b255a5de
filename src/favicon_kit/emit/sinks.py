from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping, Protocol

from favicon_kit.config import Settings
from favicon_kit.emit.bundle import AssetBundle
from favicon_kit.manifest.rewrite import rewrite_manifest_asset
from favicon_kit.refs import AssetRef, Pending, Resolved

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DevFile:
    data: bytes | str
    mime_type: str


class AssetSink(Protocol):
    def emit(self, name: str, mime_type: str, source: bytes | str) -> AssetRef: ...

    def emit_root(self, file_name: str, mime_type: str, source: bytes | str) -> None: ...

    def resolve(self, ref: AssetRef) -> str: ...

    def finalize(self, manifest_ref: AssetRef, manifest: dict[str, Any]) -> None: ...


class BuildSink:
    """Registers assets with the bundle and hands out pending references."""

    def __init__(self, bundle: AssetBundle, base: str = "/") -> None:
        self.bundle = bundle
        self.base = base if base.endswith("/") else base + "/"
        self._names: set[str] = set()

    def _claim(self, name: str) -> None:
        if name in self._names:
            raise ValueError(f"asset already emitted in this pass: {name}")
        self._names.add(name)

    def emit(self, name: str, mime_type: str, source: bytes | str) -> AssetRef:
        self._claim(name)
        ref = Pending(self.bundle.emit_asset(name=name, source=source))
        logger.info("emitted %s (%s)", name, mime_type)
        return ref

    def emit_root(self, file_name: str, mime_type: str, source: bytes | str) -> None:
        self._claim(file_name)
        self.bundle.emit_asset(file_name=file_name, source=source)
        logger.info("emitted %s (%s)", file_name, mime_type)

    def resolve(self, ref: AssetRef) -> str:
        if isinstance(ref, Resolved):
            return ref.url
        if not self.bundle.finalized:
            return ref.placeholder
        return self.base + self.bundle.get_file_name(ref.ref_id)

    def finalize(self, manifest_ref: AssetRef, manifest: dict[str, Any]) -> None:
        self.bundle.finalize()
        if isinstance(manifest_ref, Pending):
            rewrite_manifest_asset(self.bundle, manifest_ref, manifest)


class DevSink:
    """Keeps assets in memory and hands out concrete dev-server URLs."""

    def __init__(self, prefix: str = "/@favicon-kit/DEV/") -> None:
        self.prefix = prefix
        self.table: dict[str, DevFile] = {}

    def _store(self, url: str, mime_type: str, source: bytes | str) -> None:
        if url in self.table:
            raise ValueError(f"asset already emitted in this pass: {url}")
        self.table[url] = DevFile(data=source, mime_type=mime_type)

    def emit(self, name: str, mime_type: str, source: bytes | str) -> AssetRef:
        url = f"{self.prefix}{name}"
        self._store(url, mime_type, source)
        return Resolved(url)

    def emit_root(self, file_name: str, mime_type: str, source: bytes | str) -> None:
        self._store(f"/{file_name}", mime_type, source)

    def resolve(self, ref: AssetRef) -> str:
        if isinstance(ref, Pending):
            raise ValueError(f"dev assets are always resolved: {ref}")
        return ref.url

    def finalize(self, manifest_ref: AssetRef, manifest: dict[str, Any]) -> None:
        return None

    def clear(self) -> None:
        self.table = {}

    def snapshot(self) -> Mapping[str, DevFile]:
        return MappingProxyType(dict(self.table))


def make_sink(settings: Settings, *, build: bool) -> BuildSink | DevSink:
    if build:
        return BuildSink(AssetBundle(assets_dir=settings.assets_dir), base=settings.base)
    return DevSink(prefix=settings.dev_server_prefix)

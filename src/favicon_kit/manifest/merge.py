from __future__ import annotations

import copy
import json
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from favicon_kit.refs import AssetRef, Pending, Resolved, render_unresolved

MANIFEST_MIME_TYPE = "application/manifest+json"


def size_descriptor(size: int) -> str:
    return f"{size}x{size}"


def icon_entry(src: AssetRef | str, sizes: str, mime_type: str) -> dict[str, Any]:
    return {"src": src, "sizes": sizes, "type": mime_type}


def is_declared(manifest: Mapping[str, Any] | None, sizes: str, mime_type: str) -> bool:
    """True if the manifest already lists an icon with exactly these `sizes` and `type` strings."""
    if not manifest:
        return False
    return any(
        icon.get("sizes") == sizes and icon.get("type") == mime_type
        for icon in manifest.get("icons") or []
    )


def merge(manifest: Mapping[str, Any] | None, candidates: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
    """
    Return a copy of `manifest` with the candidate icons appended.

    Candidates whose (sizes, type) pair is already declared are skipped; the
    comparison is literal, so "192x192 " does not match "192x192". Declared
    icons keep their position, candidates are appended in the given order.
    """
    merged = copy.deepcopy(dict(manifest)) if manifest else {}
    additions = []
    for candidate in candidates:
        if is_declared(merged, candidate["sizes"], candidate["type"]):
            continue
        if any(a["sizes"] == candidate["sizes"] and a["type"] == candidate["type"] for a in additions):
            continue
        additions.append(dict(candidate))
    if additions:
        if merged.get("icons") is None:
            merged["icons"] = []
        merged["icons"].extend(additions)
    return merged


def dump_manifest(manifest: Mapping[str, Any], render: Callable[[AssetRef], str] = render_unresolved) -> str:
    def _default(value: Any) -> str:
        if isinstance(value, (Resolved, Pending)):
            return render(value)
        raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")

    return json.dumps(manifest, default=_default, ensure_ascii=False)

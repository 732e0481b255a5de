from __future__ import annotations

import logging
import posixpath
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from favicon_kit.errors import RewriteError
from favicon_kit.manifest.merge import dump_manifest
from favicon_kit.refs import Pending

if TYPE_CHECKING:
    from favicon_kit.emit.bundle import AssetBundle

logger = logging.getLogger(__name__)


def relative_reference(manifest_file_name: str, asset_file_name: str) -> str:
    """URL of `asset_file_name` relative to the directory holding the manifest."""
    manifest_file_name = manifest_file_name.replace("\\", "/")
    asset_file_name = asset_file_name.replace("\\", "/")
    manifest_dir = posixpath.dirname(manifest_file_name) or "."
    asset_dir = posixpath.dirname(asset_file_name) or "."
    rel = posixpath.relpath(asset_dir, manifest_dir)
    filename = posixpath.basename(asset_file_name)

    if rel == ".":
        return f"./{filename}"
    if rel.startswith(".."):
        return f"{rel}/{filename}"
    return f"./{rel}/{filename}"


def rewrite_icons(
    manifest: dict[str, Any],
    manifest_file_name: str,
    file_name_of: Callable[[str], str],
) -> dict[str, Any]:
    """Replace every pending icon reference with a path relative to the manifest."""
    for icon in manifest.get("icons") or []:
        src = icon.get("src")
        if not isinstance(src, Pending):
            continue
        icon["src"] = relative_reference(manifest_file_name, file_name_of(src.ref_id))
    return manifest


def rewrite_manifest_asset(bundle: AssetBundle, manifest_ref: Pending, manifest: dict[str, Any]) -> str:
    """Rewrite the finalized manifest asset in place and return its file name."""
    try:
        manifest_file_name = bundle.get_file_name(manifest_ref.ref_id)
    except KeyError as e:
        raise RewriteError("Failed to find generated webmanifest asset.") from e
    asset = bundle.output.get(manifest_file_name)
    if asset is None or not isinstance(asset.source, str):
        raise RewriteError("Failed to find generated webmanifest asset.")

    def _file_name_of(ref_id: str) -> str:
        try:
            file_name = bundle.get_file_name(ref_id)
        except KeyError as e:
            raise RewriteError(f"webmanifest references an asset missing from the bundle: {ref_id}") from e
        if file_name not in bundle.output:
            raise RewriteError(f"webmanifest references an asset missing from the bundle: {file_name}")
        return file_name

    rewrite_icons(manifest, manifest_file_name, _file_name_of)
    asset.source = dump_manifest(manifest)
    logger.info("rewrote icon paths in %s", manifest_file_name)
    return manifest_file_name

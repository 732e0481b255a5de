from __future__ import annotations

from dataclasses import dataclass

PLACEHOLDER_PREFIX = "__FAVICON_ASSET__"


@dataclass(frozen=True)
class Resolved:
    url: str


@dataclass(frozen=True)
class Pending:
    """Reference to a build asset whose final file name is not known yet."""

    ref_id: str

    @property
    def placeholder(self) -> str:
        return f"{PLACEHOLDER_PREFIX}{self.ref_id}__"


AssetRef = Resolved | Pending


def render_unresolved(ref: AssetRef) -> str:
    if isinstance(ref, Resolved):
        return ref.url
    return ref.placeholder

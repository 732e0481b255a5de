from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from favicon_kit.refs import AssetRef, render_unresolved

MODULE_ID = "virtual:favicon-kit"


@dataclass(frozen=True)
class VirtualModule:
    apple_touch_icon: AssetRef | None
    webmanifest: AssetRef
    favicon_sizes: str
    favicon_svg: AssetRef | None

    def as_dict(self, resolve: Callable[[AssetRef], str] = render_unresolved) -> dict[str, Any]:
        def _opt(ref: AssetRef | None) -> str | None:
            return None if ref is None else resolve(ref)

        return {
            "apple_touch_icon": _opt(self.apple_touch_icon),
            "webmanifest": resolve(self.webmanifest),
            "favicon_sizes": self.favicon_sizes,
            "favicon_svg": _opt(self.favicon_svg),
        }

    def render(self, resolve: Callable[[AssetRef], str] = render_unresolved) -> str:
        lines = [f"export const {key} = {json.dumps(value)};" for key, value in self.as_dict(resolve).items()]
        return "\n".join(lines) + "\n"

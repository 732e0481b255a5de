from __future__ import annotations

import enum
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Mapping

from favicon_kit.config import Settings
from favicon_kit.emit.sinks import AssetSink, BuildSink, DevFile, DevSink, make_sink
from favicon_kit.imaging import ico
from favicon_kit.imaging.svg import optimize_svg
from favicon_kit.imaging.variants import (
    FailureRecord,
    SourceImage,
    VariantGenerator,
    VariantRequest,
    open_source,
    validate_source,
)
from favicon_kit.manifest.merge import MANIFEST_MIME_TYPE, dump_manifest, icon_entry, is_declared, merge, size_descriptor
from favicon_kit.module import VirtualModule
from favicon_kit.refs import AssetRef

logger = logging.getLogger(__name__)

ANDROID_SIZES = (192, 512)
APPLE_TOUCH_SIZE = 180
PNG_MIME_TYPE = "image/png"
SVG_MIME_TYPE = "image/svg+xml"
ICO_MIME_TYPE = "image/x-icon"


class Phase(enum.Enum):
    UNINITIALIZED = "uninitialized"
    GENERATED = "generated"
    SERVING = "serving"


@dataclass
class GenerationResult:
    module: VirtualModule
    manifest: dict[str, Any]
    manifest_ref: AssetRef
    ico: bytes | None
    failures: list[FailureRecord] = field(default_factory=list)


def summarize_failures(failures: list[FailureRecord], source: SourceImage) -> str:
    plural = "" if len(failures) == 1 else "s"
    lines = [
        f"Failed to generate {len(failures)} favicon{plural}. "
        f"Please provide a larger input image (currently {source.width}x{source.height}):"
    ]
    lines.extend(f"  {f.name} (required size {f.size}x{f.size})" for f in failures)
    return "\n".join(lines)


class FaviconPipeline:
    """
    Owns one favicon generation pass and the state it leaves behind.

    Phases: UNINITIALIZED -> GENERATED (after `generate`) -> SERVING (once the
    dev server takes its first snapshot). `reset` returns to UNINITIALIZED.
    """

    def __init__(self, settings: Settings, sink: AssetSink) -> None:
        self.settings = settings
        self.sink = sink
        self.phase = Phase.UNINITIALIZED
        self.result: GenerationResult | None = None
        self._lock = threading.Lock()
        self._snapshot: Mapping[str, DevFile] | None = None

    @classmethod
    def for_build(cls, settings: Settings) -> FaviconPipeline:
        return cls(settings, make_sink(settings, build=True))

    @classmethod
    def for_dev(cls, settings: Settings) -> FaviconPipeline:
        return cls(settings, make_sink(settings, build=False))

    def reset(self) -> None:
        with self._lock:
            if isinstance(self.sink, DevSink):
                self.sink.clear()
            elif isinstance(self.sink, BuildSink):
                self.sink = make_sink(self.settings, build=True)
            self.phase = Phase.UNINITIALIZED
            self.result = None
            self._snapshot = None

    def generate(self) -> GenerationResult:
        with self._lock:
            if self.result is not None:
                return self.result
            self.result = self._generate()
            self.phase = Phase.GENERATED
            return self.result

    def _generate(self) -> GenerationResult:
        settings = self.settings
        source = open_source(settings.path, svg_density=settings.svg_density)
        validate_source(source)

        declared = settings.webmanifest
        android_sizes = [s for s in ANDROID_SIZES if not is_declared(declared, size_descriptor(s), PNG_MIME_TYPE)]
        ico_requests = [VariantRequest(s, "ico-part", f"favicon.ico (size {s})") for s in ico.FAVICON_SIZES]
        android_requests = [VariantRequest(s, "android-icon", f"android-{s}.png") for s in android_sizes]
        apple_request = VariantRequest(APPLE_TOUCH_SIZE, "apple-touch-icon", "apple-touch-icon.png")

        generator = VariantGenerator(source, max_workers=settings.max_workers)
        requests = ico_requests + android_requests + [apple_request]
        produced = dict(zip(requests, generator.produce_many(requests)))
        failures = [r for r in produced.values() if isinstance(r, FailureRecord)]

        svg_ref = None
        if source.svg_text is not None:
            svg_ref = self.sink.emit("favicon.svg", SVG_MIME_TYPE, optimize_svg(source.svg_text))

        ico_parts = [(r.size, produced[r]) for r in ico_requests if isinstance(produced[r], bytes)]
        ico_bytes = None
        if ico_parts:
            ico_bytes = ico.pack([png for _, png in ico_parts])
            self.sink.emit_root("favicon.ico", ICO_MIME_TYPE, ico_bytes)
        else:
            logger.warning("favicon.ico skipped: no sizes could be produced")
        favicon_sizes = " ".join(size_descriptor(size) for size, _ in ico_parts)

        candidates = []
        for request in android_requests:
            png = produced[request]
            if isinstance(png, FailureRecord):
                continue
            ref = self.sink.emit(request.name, PNG_MIME_TYPE, png)
            candidates.append(icon_entry(ref, size_descriptor(request.size), PNG_MIME_TYPE))
        if svg_ref is not None:
            candidates.append(icon_entry(svg_ref, "any", SVG_MIME_TYPE))
        manifest = merge(declared, candidates)
        manifest_ref = self.sink.emit("site.webmanifest", MANIFEST_MIME_TYPE, dump_manifest(manifest, self.sink.resolve))

        apple_ref = None
        apple_png = produced[apple_request]
        if isinstance(apple_png, bytes):
            apple_ref = self.sink.emit(apple_request.name, PNG_MIME_TYPE, apple_png)

        if failures:
            logger.warning(summarize_failures(failures, source))

        module = VirtualModule(
            apple_touch_icon=apple_ref,
            webmanifest=manifest_ref,
            favicon_sizes=favicon_sizes,
            favicon_svg=svg_ref,
        )
        return GenerationResult(
            module=module,
            manifest=manifest,
            manifest_ref=manifest_ref,
            ico=ico_bytes,
            failures=failures,
        )

    def finalize(self) -> None:
        """Resolve pending references once the host has assigned final file names."""
        if self.result is None:
            raise RuntimeError("finalize() called before generate()")
        self.sink.finalize(self.result.manifest_ref, self.result.manifest)

    def module_source(self) -> str:
        return self.generate().module.render(self.sink.resolve)

    def snapshot(self) -> Mapping[str, DevFile] | None:
        """Read-only view of the dev URL table, or None before generation."""
        if self.phase is Phase.UNINITIALIZED or not isinstance(self.sink, DevSink):
            return None
        if self._snapshot is None:
            self._snapshot = self.sink.snapshot()
            self.phase = Phase.SERVING
        return self._snapshot

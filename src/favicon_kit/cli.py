from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from favicon_kit.config import Settings
from favicon_kit.errors import FaviconError
from favicon_kit.pipeline import FaviconPipeline

logger = logging.getLogger(__name__)


def load_settings(args: argparse.Namespace) -> Settings:
    overrides = {}
    if args.path is not None:
        overrides["path"] = args.path
    if args.webmanifest is not None:
        with args.webmanifest.open("r", encoding="utf-8") as f:
            overrides["webmanifest"] = json.load(f)
    if getattr(args, "out", None) is not None:
        overrides["out_dir"] = args.out
    return Settings(**overrides)


def run_build(args: argparse.Namespace, settings: Settings) -> None:
    pipeline = FaviconPipeline.for_build(settings)
    pipeline.generate()
    pipeline.finalize()
    pipeline.sink.bundle.write(settings.out_dir)

    module = pipeline.module_source()
    if args.module_out is not None:
        args.module_out.parent.mkdir(parents=True, exist_ok=True)
        args.module_out.write_text(module, encoding="utf-8")
        logger.info("wrote %s", args.module_out)
    else:
        print(module, end="")


def run_dev(args: argparse.Namespace, settings: Settings) -> None:
    import uvicorn

    from favicon_kit.api.main import create_app

    pipeline = FaviconPipeline.for_dev(settings)
    pipeline.generate()
    uvicorn.run(create_app(pipeline), host=args.host, port=args.port)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="favicon-kit", description="Generate favicons, icons and a web app manifest")
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_common(p: argparse.ArgumentParser) -> None:
        p.add_argument("--path", type=Path, default=None, help="source image (overrides FAVICON_PATH)")
        p.add_argument("--webmanifest", type=Path, default=None, help="JSON file with site.webmanifest fields")

    build_parser = subparsers.add_parser("build", help="Write the favicon asset set to an output directory")
    add_common(build_parser)
    build_parser.add_argument("--out", type=Path, default=None)
    build_parser.add_argument("--module-out", type=Path, default=None, help="where to write the generated module")

    dev_parser = subparsers.add_parser("dev", help="Serve generated favicons from memory")
    add_common(dev_parser)
    dev_parser.add_argument("--host", default="127.0.0.1")
    dev_parser.add_argument("--port", type=int, default=5173)

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    settings = load_settings(args)
    logging.basicConfig(level=settings.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    try:
        if args.command == "build":
            run_build(args, settings)
        elif args.command == "dev":
            run_dev(args, settings)
        else:
            raise SystemExit(f"error: unknown command {args.command}")
    except FaviconError as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

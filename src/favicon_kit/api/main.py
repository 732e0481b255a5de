from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException
from fastapi.responses import Response

from favicon_kit import __version__
from favicon_kit.config import settings
from favicon_kit.errors import FaviconError
from favicon_kit.module import MODULE_ID
from favicon_kit.pipeline import FaviconPipeline

logger = logging.getLogger(__name__)


def create_app(pipeline: FaviconPipeline | None = None) -> FastAPI:
    app = FastAPI(title="favicon-kit dev server", version=__version__)
    app.state.pipeline = pipeline if pipeline is not None else FaviconPipeline.for_dev(settings)

    # Generated files are answered before routing; anything unknown falls through.
    @app.middleware("http")
    async def _serve_generated(request, call_next):  # noqa: ANN001
        table = app.state.pipeline.snapshot()
        if table is not None:
            file = table.get(request.url.path)
            if file is not None:
                return Response(content=file.data, media_type=file.mime_type)
        return await call_next(request)

    @app.get(f"/@id/{MODULE_ID}", include_in_schema=False)
    def favicon_module() -> Response:
        try:
            source = app.state.pipeline.module_source()
        except FaviconError as e:
            logger.error("favicon generation failed: %s", e)
            raise HTTPException(status_code=500, detail=str(e)) from e
        return Response(content=source, media_type="text/javascript")

    @app.get("/health")
    def health() -> dict:
        return {"ok": True, "service": "favicon-kit", "phase": app.state.pipeline.phase.value}

    return app

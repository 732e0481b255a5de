from __future__ import annotations

from fastapi.testclient import TestClient

from favicon_kit.api.main import create_app
from favicon_kit.config import Settings
from favicon_kit.pipeline import FaviconPipeline


def test_favicon_falls_through_before_generation(make_source) -> None:
    pipeline = FaviconPipeline.for_dev(Settings(path=make_source(64)))
    client = TestClient(create_app(pipeline))

    response = client.get("/favicon.ico")
    assert response.status_code == 404


def test_serves_generated_files(make_source) -> None:
    pipeline = FaviconPipeline.for_dev(Settings(path=make_source(256), dev_server_prefix="/@dev/"))
    result = pipeline.generate()
    client = TestClient(create_app(pipeline))

    response = client.get("/favicon.ico")
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/x-icon"
    assert response.content == result.ico

    response = client.get("/@dev/android-192.png")
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"

    response = client.get("/@dev/site.webmanifest")
    assert response.headers["content-type"].startswith("application/manifest+json")
    assert response.json()["icons"][0]["sizes"] == "192x192"

    assert client.get("/@dev/missing.png").status_code == 404
    assert client.get("/health").json()["phase"] == "serving"


def test_module_route_generates_lazily(make_source) -> None:
    pipeline = FaviconPipeline.for_dev(Settings(path=make_source(512), dev_server_prefix="/@dev/"))
    client = TestClient(create_app(pipeline))

    response = client.get("/@id/virtual:favicon-kit")
    assert response.status_code == 200
    assert 'export const webmanifest = "/@dev/site.webmanifest";' in response.text
    assert 'export const favicon_sizes = "16x16 32x32 48x48";' in response.text
    assert client.get("/favicon.ico").status_code == 200


def test_module_route_reports_config_error(make_source) -> None:
    pipeline = FaviconPipeline.for_dev(Settings(path=make_source(100, 200)))
    client = TestClient(create_app(pipeline))

    response = client.get("/@id/virtual:favicon-kit")
    assert response.status_code == 500
    assert "square" in response.json()["detail"]

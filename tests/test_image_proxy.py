"""
Unit tests for the status image proxy.
The upstream is replaced by an httpx.MockTransport, both when calling the
service directly and when going through the /api/cat route.
"""

# pylint: disable=redefined-outer-name
# pylint: disable=protected-access

import httpx
import pytest
from fastapi.testclient import TestClient

from src.api.dependencies import get_image_service
from src.main import app
from src.services import image_proxy
from src.services.image_proxy import StatusImageService, UpstreamUnavailableError

client = TestClient(app)

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"cat" * 1000


def upstream_ok(request: httpx.Request) -> httpx.Response:
    """Serves a fake image for any code."""
    return httpx.Response(200, content=PNG_BYTES, headers={"Content-Type": "image/jpeg"})


def upstream_missing(request: httpx.Request) -> httpx.Response:
    return httpx.Response(404, text="no such cat")


def upstream_down(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


def make_service(handler) -> StatusImageService:
    return StatusImageService("https://cats.test/", timeout=1.0, transport=httpx.MockTransport(handler))


@pytest.fixture
def use_upstream():
    """Returns a function installing a fake upstream behind /api/cat."""

    def install(handler) -> None:
        service = make_service(handler)
        app.dependency_overrides[get_image_service] = lambda: service

    yield install
    app.dependency_overrides = {}


# --- Service ---


@pytest.mark.asyncio
async def test_open_requests_code_url() -> None:
    """The upstream URL is base_url/code."""
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return upstream_ok(request)

    image = await make_service(handler).open(404)
    await image.aclose()

    assert seen == ["https://cats.test/404"]


@pytest.mark.asyncio
async def test_iter_bytes_streams_and_releases() -> None:
    """Draining the body yields it verbatim and closes the upstream."""
    image = await make_service(upstream_ok).open(200)

    assert image.content_type == "image/jpeg"

    body = b"".join([chunk async for chunk in image.iter_bytes()])

    assert body == PNG_BYTES
    assert image._closed is True
    assert image._response.is_closed


@pytest.mark.asyncio
async def test_aclose_is_idempotent() -> None:
    image = await make_service(upstream_ok).open(200)

    await image.aclose()
    await image.aclose()

    assert image._response.is_closed
    assert image._client.is_closed


@pytest.mark.asyncio
async def test_open_non_200_raises() -> None:
    with pytest.raises(UpstreamUnavailableError):
        await make_service(upstream_missing).open(200)


@pytest.mark.asyncio
async def test_open_transport_error_raises() -> None:
    with pytest.raises(UpstreamUnavailableError):
        await make_service(upstream_down).open(200)


class TrackedStream(httpx.AsyncByteStream):
    """Upstream body that remembers whether it was closed."""

    def __init__(self) -> None:
        self.closed = False

    async def __aiter__(self):
        yield b"no such cat"

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def opened_clients(monkeypatch):
    """Records every AsyncClient the service creates."""
    clients = []

    class RecordingClient(httpx.AsyncClient):
        def __init__(self, *args, **kwargs):
            super().__init__(*args, **kwargs)
            clients.append(self)

    monkeypatch.setattr(image_proxy.httpx, "AsyncClient", RecordingClient)
    return clients


@pytest.mark.asyncio
async def test_open_non_200_releases_response_and_client(opened_clients) -> None:
    body = TrackedStream()

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, stream=body)

    with pytest.raises(UpstreamUnavailableError):
        await make_service(handler).open(200)

    assert body.closed
    assert len(opened_clients) == 1
    assert opened_clients[0].is_closed


@pytest.mark.asyncio
async def test_open_transport_error_releases_client(opened_clients) -> None:
    with pytest.raises(UpstreamUnavailableError):
        await make_service(upstream_down).open(200)

    assert len(opened_clients) == 1
    assert opened_clients[0].is_closed


# --- Route ---


def test_cat_route_streams_image(use_upstream) -> None:
    use_upstream(upstream_ok)

    response = client.get("/api/cat/200")

    assert response.status_code == 200
    assert response.headers["content-type"] == "image/jpeg"
    assert response.content == PNG_BYTES
    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"


@pytest.mark.parametrize("handler", [upstream_missing, upstream_down])
def test_cat_route_upstream_failure(use_upstream, handler) -> None:
    """Any upstream problem is a plain-text 404."""
    use_upstream(handler)

    response = client.get("/api/cat/500")

    assert response.status_code == 404
    assert response.text == "Failed to fetch image"
    assert response.headers["content-type"].startswith("text/plain")


@pytest.mark.parametrize("code", ["700", "42", "cat"])
def test_cat_route_invalid_code(use_upstream, code) -> None:
    """Invalid codes are rejected before any upstream call."""
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return upstream_ok(request)

    use_upstream(handler)

    response = client.get(f"/api/cat/{code}")

    assert response.status_code == 400
    assert response.text == "Invalid status code"
    assert not calls

"""FastAPI server exposing the recommendation endpoints."""

from typing import Optional

from fastapi import FastAPI, File, Form, HTTPException, UploadFile

from logic.relaxation_search import CatalogQueryError
from logic.validation import AnalyzeRequest, PreferenceRequest
from matcher_app.app import JewelMatcherApp
from matcher_app.logging_config import configure_logging
from tools.image_fetcher import ImageFetchError, InvalidImageURLError

configure_logging()

app = FastAPI(title="Jewel Match", version="0.1.0")
_matcher: JewelMatcherApp | None = None


def get_matcher() -> JewelMatcherApp:
    """Return the process-wide matcher, creating it on first use."""

    global _matcher
    if _matcher is None:
        _matcher = JewelMatcherApp()
    return _matcher


def set_matcher(matcher: JewelMatcherApp | None) -> None:
    """Swap the matcher used by the endpoints (tests, embedding)."""

    global _matcher
    _matcher = matcher


@app.get("/healthz")
def healthcheck() -> dict:
    """Lightweight readiness check."""

    matcher = get_matcher()
    return {
        "status": "ok",
        "service": "jewel-match",
        "environment": matcher.config.environment or "local",
    }


@app.post("/recommendations/analyze")
def analyze(
    image: Optional[UploadFile] = File(None),
    image_url: Optional[str] = Form(None),
    occasion: str = Form("daily"),
    style: str = Form("modern"),
    budget: str = Form("medium"),
    material: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    gender: str = Form("unisex"),
) -> dict:
    """Analyze an uploaded (or linked) photo and recommend matching pieces."""

    matcher = get_matcher()
    if image is None and not image_url:
        raise HTTPException(status_code=400, detail="No image uploaded")

    payload: bytes | None = None
    if image is not None:
        if image.content_type and not image.content_type.startswith("image/"):
            raise HTTPException(status_code=400, detail="Only image files are allowed")
        payload = image.file.read(matcher.config.max_upload_bytes + 1)
        if len(payload) > matcher.config.max_upload_bytes:
            raise HTTPException(status_code=400, detail="Image exceeds upload size limit")

    try:
        request = AnalyzeRequest(
            image_url=image_url,
            occasion=occasion,
            style=style,
            budget=budget,
            material=material,
            category=category,
            gender=gender,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    try:
        return matcher.analyze(request, image=payload)
    except (InvalidImageURLError, ImageFetchError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except CatalogQueryError as exc:
        raise HTTPException(status_code=503, detail="Catalog unavailable") from exc


@app.post("/recommendations/suggest")
def suggest(request: PreferenceRequest) -> dict:
    """Recommend pieces from stated preferences only."""

    try:
        return get_matcher().suggest(request)
    except CatalogQueryError as exc:
        raise HTTPException(status_code=503, detail="Catalog unavailable") from exc


def get_app() -> FastAPI:
    """Expose the FastAPI instance for ASGI servers."""

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.api:app", host="0.0.0.0", port=8080, reload=False)

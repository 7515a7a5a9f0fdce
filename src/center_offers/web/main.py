from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates

from center_offers.services.aggregator import CenterOffersPanel, EditorContext
from center_offers.services.contentful import ContentfulClient, make_client


logger = logging.getLogger(__name__)

app = FastAPI(title="Center Offers")
templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

_client: Optional[ContentfulClient] = None


def get_client() -> ContentfulClient:
    global _client
    if _client is None:
        _client = make_client()
    return _client


def _context(client: ContentfulClient, center_id: str, space: Optional[str], environment: Optional[str]) -> EditorContext:
    return EditorContext(
        space_id=space or client.config.space_id or "",
        environment_id=environment or client.config.environment_id,
        entry_id=center_id,
        locale=client.config.locale,
    )


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/centers/{center_id}", response_class=HTMLResponse)
def center_panel(
    request: Request,
    center_id: str,
    space: Optional[str] = Query(None, description="Space id; defaults to CONTENTFUL_SPACE_ID"),
    environment: Optional[str] = Query(None, description="Environment id; defaults to CONTENTFUL_ENVIRONMENT"),
    client: ContentfulClient = Depends(get_client),
) -> HTMLResponse:
    panel = CenterOffersPanel(_context(client, center_id, space, environment), client=client).activate()
    return templates.TemplateResponse(
        request,
        "panel.html",
        {"panel": panel, "center_id": center_id},
        status_code=502 if panel.error else 200,
    )


@app.get("/api/centers/{center_id}")
def center_offers_json(
    center_id: str,
    space: Optional[str] = Query(None),
    environment: Optional[str] = Query(None),
    client: ContentfulClient = Depends(get_client),
) -> JSONResponse:
    panel = CenterOffersPanel(_context(client, center_id, space, environment), client=client).activate()
    if panel.error:
        return JSONResponse({"center_id": center_id, "error": panel.error}, status_code=502)
    return JSONResponse(panel.result.model_dump(mode="json"))

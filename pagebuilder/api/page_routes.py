"""
Page Routes
===========

API routes for stored page documents and the public page.
"""

import logging
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from ..models.document_models import parse_document, parse_sections, PageDocument
from ..render.public_page import build_public_html, render_public
from ..services.prediction_client import PredictionClient, PredictionRequest, PredictionResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/pages", tags=["pages"])

# Injected by server
document_store = None
prediction_client: Optional[PredictionClient] = None


class CreatePageRequest(BaseModel):
    title: str = "Untitled Page"


class SavePageRequest(BaseModel):
    """Page document to store."""
    sections: List[Any] = Field(default_factory=list)


class PageResponse(BaseModel):
    page_id: str
    title: str
    builder_mode: str
    document: Dict[str, Any]


class PredictRequest(BaseModel):
    """Image sent from the public chat widget."""
    image: str
    user_id: str
    project_id: str
    project_type: str = "IMAGE"
    base_model_name: Optional[str] = None


def _require_store():
    if document_store is None:
        raise HTTPException(status_code=500, detail="Document store not initialized")
    return document_store


async def _get_page_or_404(page_id: str):
    page = await _require_store().get_page(page_id)
    if page is None:
        raise HTTPException(status_code=404, detail="Page not found")
    return page


@router.post("")
async def create_page(request: CreatePageRequest):
    """Create an empty page (file store only)."""
    store = _require_store()
    if not hasattr(store, "create_page"):
        raise HTTPException(status_code=501, detail="Document store does not create pages")
    page_id = store.create_page(title=request.title)
    return {"page_id": page_id, "message": "Page created"}


@router.get("/{page_id}")
async def get_page(page_id: str) -> PageResponse:
    """Load a page document, upgraded to per-breakpoint geometries."""
    page = await _get_page_or_404(page_id)
    document = parse_document(page.page_config, title=page.title)
    return PageResponse(
        page_id=page_id,
        title=page.title,
        builder_mode=page.builder_mode,
        document=document.to_dict()
    )


@router.put("/{page_id}")
async def save_page(page_id: str, request: SavePageRequest):
    """Store a page document. Malformed sections are dropped, not rejected."""
    await _get_page_or_404(page_id)
    elements, dropped = parse_sections(request.sections)
    saved = await _require_store().save(page_id, PageDocument(sections=elements).to_dict())
    return {"success": saved, "page_id": page_id, "sections": len(elements), "dropped": dropped}


@router.get("/{page_id}/render")
async def render_page(
    page_id: str,
    viewport_width: float = Query(1280, gt=0),
    format: str = Query("html", pattern="^(html|json)$")
):
    """Render the public page for a viewport width."""
    page = await _get_page_or_404(page_id)
    if format == "json":
        return render_public(page.page_config, viewport_width, title=page.title).model_dump(mode="json")
    return HTMLResponse(build_public_html(
        page.page_config,
        viewport_width,
        title=page.title,
        builder_mode=page.builder_mode,
        custom_html=page.custom_html
    ))


@router.post("/{page_id}/predict")
async def predict(page_id: str, request: PredictRequest) -> PredictionResponse:
    """Forward a chat widget image to the prediction service."""
    await _get_page_or_404(page_id)
    if prediction_client is None:
        raise HTTPException(status_code=500, detail="Prediction client not initialized")
    return await prediction_client.predict(PredictionRequest(**request.model_dump()))

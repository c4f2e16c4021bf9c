"""
Page Builder Server
===================

FastAPI server for the visual page builder.

Features:
- Editor sessions with per-breakpoint (desktop/tablet/mobile) layouts
- Drag/resize gesture bindings with zoom-aware pointer handling
- Public page rendering for any viewport width
- Page documents persisted to a file or REST document store
"""

import os
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Import services
from .services.document_store import FileDocumentStore
from .services.remote_store_client import RemoteDocumentStore
from .services.prediction_client import PredictionClient, PREDICTION_API_URL

# Import canvas manager
from .canvas.state_manager import StateManager

# Import layout constants
from .models.geometry_models import REFERENCE_WIDTHS, MIN_WIDTH, MIN_HEIGHT, MIN_ZOOM, MAX_ZOOM, ZOOM_STEP
from .models.layout_models import ELEMENT_DEFAULTS

# Import API routers
from .api import page_routes, canvas_routes, element_routes, gesture_routes

# "file" or "remote"
DOCUMENT_STORE_BACKEND = os.getenv("DOCUMENT_STORE_BACKEND", "file")


def create_document_store(backend: str = DOCUMENT_STORE_BACKEND):
    """Build the configured document store."""
    if backend == "remote":
        return RemoteDocumentStore()
    pages_dir = os.getenv("PAGES_DIR") or Path(__file__).parent.parent / "pages"
    return FileDocumentStore(pages_dir=pages_dir)


# Shared service instances
state_manager: StateManager = None
document_store = None
prediction_client: PredictionClient = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    global state_manager, document_store, prediction_client

    logger.info("[PAGE-BUILDER] Starting up...")

    state_manager = StateManager()
    document_store = create_document_store()
    prediction_client = PredictionClient(
        timeout=30.0  # 30 second timeout for predictions
    )

    # Inject into route modules
    canvas_routes.state_manager = state_manager
    canvas_routes.document_store = document_store
    page_routes.document_store = document_store
    page_routes.prediction_client = prediction_client

    logger.info(f"[PAGE-BUILDER] Services initialized (store={DOCUMENT_STORE_BACKEND})")

    yield

    # Cleanup
    logger.info("[PAGE-BUILDER] Shutting down...")
    if document_store:
        await document_store.close()


# Create FastAPI app
app = FastAPI(
    title="Page Builder",
    description="Visual page builder with a responsive absolute-position layout engine",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Allow all origins for development
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(page_routes.router)
app.include_router(canvas_routes.router)
app.include_router(element_routes.router)
app.include_router(gesture_routes.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "page-builder",
        "document_store": DOCUMENT_STORE_BACKEND,
        "prediction_api": PREDICTION_API_URL
    }


@app.get("/api/info")
async def api_info():
    """Get API information, element types and layout limits."""
    return {
        "service": "Page Builder",
        "version": "1.0.0",
        "element_types": [
            {
                "type": element_type.value,
                "default_content": defaults["content"],
                "default_geometry": defaults["geometry"].model_dump(),
                "requires_content": defaults["requires_content"]
            }
            for element_type, defaults in ELEMENT_DEFAULTS.items()
        ],
        "breakpoints": {bp.value: width for bp, width in REFERENCE_WIDTHS.items()},
        "limits": {
            "min_width": MIN_WIDTH,
            "min_height": MIN_HEIGHT,
            "zoom": {"min": MIN_ZOOM, "max": MAX_ZOOM, "step": ZOOM_STEP}
        }
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "pagebuilder.server:app",
        host="0.0.0.0",
        port=8080,
        reload=True
    )

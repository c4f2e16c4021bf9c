"""
Document Store
==============

File-backed key-value store for page documents, one JSON file per page.
"""

import json
import logging
import os
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional
from pydantic import BaseModel

logger = logging.getLogger(__name__)

PAGES_DIR = os.getenv("PAGES_DIR", "pages")


class StoredPage(BaseModel):
    """A page record as kept by a document store."""
    id: str
    title: str = "Untitled Page"
    builder_mode: str = "visual"    # visual | html
    custom_html: Optional[str] = None
    page_config: Optional[Dict[str, Any]] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class FileDocumentStore:
    """Stores page records as JSON files with an in-memory cache."""

    def __init__(self, pages_dir: Optional[Path] = None):
        self.pages_dir = Path(pages_dir or PAGES_DIR)
        self.pages_dir.mkdir(parents=True, exist_ok=True)
        self._cache: Dict[str, Dict[str, Any]] = {}
        logger.info(f"[DOCUMENT-STORE] Initialized with pages_dir={self.pages_dir}")

    def _page_path(self, page_id: str) -> Path:
        return self.pages_dir / f"{page_id}.json"

    def _read(self, page_id: str) -> Optional[Dict[str, Any]]:
        if page_id in self._cache:
            return self._cache[page_id]

        page_path = self._page_path(page_id)
        if not page_path.exists():
            return None
        try:
            with open(page_path) as f:
                self._cache[page_id] = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"[DOCUMENT-STORE] Failed to read {page_path}: {e}")
            return None
        return self._cache[page_id]

    def _write(self, page_id: str) -> bool:
        page_path = self._page_path(page_id)
        tmp_path = page_path.with_suffix(".json.tmp")
        try:
            with open(tmp_path, "w") as f:
                json.dump(self._cache[page_id], f, indent=2)
            os.replace(tmp_path, page_path)
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"[DOCUMENT-STORE] Failed to write {page_path}: {e}")
            return False

    def create_page(self, title: str = "Untitled Page", page_id: Optional[str] = None) -> str:
        """Create an empty page record (no page_config yet)."""
        page_id = page_id or str(uuid.uuid4())
        if self._read(page_id) is None:
            self._cache[page_id] = {
                "id": page_id,
                "title": title,
                "builder_mode": "visual",
                "custom_html": None,
                "page_config": None,
                "created_at": datetime.now().isoformat(),
                "updated_at": None,
            }
            self._write(page_id)
        return page_id

    async def get_page(self, page_id: str) -> Optional[StoredPage]:
        data = self._read(page_id)
        if data is None:
            return None
        return StoredPage(**{**data, "id": page_id})

    async def load(self, page_id: str) -> Optional[Dict[str, Any]]:
        """Page document for a page, or None if the page does not exist or was never saved."""
        page = await self.get_page(page_id)
        return page.page_config if page else None

    async def save(self, page_id: str, document: Dict[str, Any]) -> bool:
        """Store a page document. Returns False if the page is unknown or the write fails."""
        data = self._read(page_id)
        if data is None:
            logger.warning(f"[DOCUMENT-STORE] Save for unknown page {page_id}")
            return False

        data["page_config"] = document
        data["updated_at"] = datetime.now().isoformat()
        saved = self._write(page_id)
        if saved:
            logger.info(f"[DOCUMENT-STORE] Saved page {page_id} ({len(document.get('sections', []))} sections)")
        return saved

    async def close(self):
        self._cache.clear()

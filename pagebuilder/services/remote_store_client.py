"""
Remote Document Store Client
============================

Client for a hosted REST table holding page records (PostgREST-style API:
rows filtered with `?id=eq.<id>`, updated with PATCH).
"""

import logging
import os
import ssl
from typing import Any, Dict, Optional

import aiohttp
import certifi
from pydantic import BaseModel

from .document_store import StoredPage

logger = logging.getLogger(__name__)

DOCUMENT_STORE_URL = os.getenv("DOCUMENT_STORE_URL", "http://localhost:54321")
DOCUMENT_STORE_KEY = os.getenv("DOCUMENT_STORE_KEY", "")


class StoreConfig(BaseModel):
    """Connection settings for the remote store."""
    base_url: str = DOCUMENT_STORE_URL
    api_key: str = DOCUMENT_STORE_KEY
    table: str = "deployments"
    timeout: float = 30.0


class RemoteDocumentStore:
    """REST client for page records. Failures are logged and reported as None/False."""

    def __init__(self, config: Optional[StoreConfig] = None):
        self.config = config or StoreConfig()
        self._session: Optional[aiohttp.ClientSession] = None
        logger.info(f"[REMOTE-STORE] Initialized with url={self.config.base_url}, table={self.config.table}")

    @property
    def table_url(self) -> str:
        return f"{self.config.base_url.rstrip('/')}/rest/v1/{self.config.table}"

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.config.api_key:
            headers["apikey"] = self.config.api_key
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        return headers

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            ssl_context = ssl.create_default_context(cafile=certifi.where())
            connector = aiohttp.TCPConnector(ssl=ssl_context)
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.config.timeout),
                connector=connector,
                headers=self._headers()
            )
        return self._session

    async def close(self):
        """Close the client session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def get_page(self, page_id: str) -> Optional[StoredPage]:
        """Fetch one page record."""
        params = {"id": f"eq.{page_id}", "select": "*"}
        try:
            session = await self._get_session()
            async with session.get(self.table_url, params=params) as resp:
                if resp.status != 200:
                    error_text = await resp.text()
                    logger.error(f"[REMOTE-STORE] Error loading page {page_id}: {resp.status} - {error_text}")
                    return None
                rows = await resp.json()
        except aiohttp.ClientError as e:
            logger.error(f"[REMOTE-STORE] Connection error: {e}")
            return None
        except Exception as e:
            logger.error(f"[REMOTE-STORE] Unexpected error: {e}")
            return None

        if not rows:
            return None
        row = rows[0]
        return StoredPage(
            id=str(row.get("id", page_id)),
            title=row.get("title") or "Untitled Page",
            builder_mode=row.get("builder_mode") or "visual",
            custom_html=row.get("custom_html"),
            page_config=row.get("page_config"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )

    async def load(self, page_id: str) -> Optional[Dict[str, Any]]:
        page = await self.get_page(page_id)
        return page.page_config if page else None

    async def save(self, page_id: str, document: Dict[str, Any]) -> bool:
        """Write a page document into the record's page_config column."""
        params = {"id": f"eq.{page_id}"}
        try:
            session = await self._get_session()
            async with session.patch(self.table_url, params=params, json={"page_config": document}) as resp:
                if resp.status in (200, 204):
                    logger.info(f"[REMOTE-STORE] Saved page {page_id}")
                    return True
                error_text = await resp.text()
                logger.error(f"[REMOTE-STORE] Error saving page {page_id}: {resp.status} - {error_text}")
                return False
        except aiohttp.ClientError as e:
            logger.error(f"[REMOTE-STORE] Connection error: {e}")
            return False
        except Exception as e:
            logger.error(f"[REMOTE-STORE] Unexpected error: {e}")
            return False

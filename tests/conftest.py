"""
Pytest configuration and shared fixtures for Page Builder tests.
"""

import pytest
from fastapi.testclient import TestClient

from pagebuilder.models.geometry_models import Geometry
from pagebuilder.models.layout_models import Element, ElementType
from pagebuilder.canvas.session import CanvasSession


@pytest.fixture
def right_edge_text():
    """Text element placed near the right edge of the desktop canvas."""
    return Element.create(ElementType.TEXT, Geometry(x=1100, y=50, w=300, h=80), element_id="sec-edge")


@pytest.fixture
def canvas(right_edge_text):
    """Canvas session holding the right-edge text element."""
    return CanvasSession(elements=[right_edge_text])


@pytest.fixture
def client(tmp_path, monkeypatch):
    """API client backed by a file store in a temporary directory."""
    monkeypatch.setenv("PAGES_DIR", str(tmp_path))
    from pagebuilder.server import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def page_id(client):
    response = client.post("/api/pages", json={"title": "Demo Page"})
    assert response.status_code == 200
    return response.json()["page_id"]


@pytest.fixture
def session_id(client, page_id):
    response = client.post("/api/canvas/session", json={"page_id": page_id})
    assert response.status_code == 200
    return response.json()["session_id"]

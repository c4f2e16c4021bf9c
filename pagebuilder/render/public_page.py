"""
Public Page Rendering
=====================

Visitor-facing entry point: classify the viewport into a breakpoint and
render the stored composition without editor chrome.
"""

import html
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from ..models.document_models import parse_document
from ..layout.geometry import classify_viewport
from .surface import RenderMode, RenderedPage, render

logger = logging.getLogger(__name__)

BUILDER_MODE_VISUAL = "visual"
BUILDER_MODE_HTML = "html"


def render_public(document: Optional[Dict[str, Any]], viewport_width: float, title: Optional[str] = None) -> RenderedPage:
    """
    Render a stored page document for a visitor's viewport.

    Args:
        document: Persisted page document ({"sections": [...]})
        viewport_width: Visitor viewport width in px
        title: Page title, used by the default sections of an unbuilt page

    Returns:
        RenderedPage at the matching breakpoint, STATIC mode
    """
    breakpoint = classify_viewport(viewport_width)
    page = parse_document(document, title=title)
    logger.info(f"[PUBLIC-PAGE] Rendering {len(page.sections)} sections at {breakpoint.value} ({viewport_width}px)")
    return render(page.sections, breakpoint, RenderMode.STATIC)


def build_public_html(
    document: Optional[Dict[str, Any]],
    viewport_width: float,
    title: str = "Untitled Page",
    builder_mode: str = BUILDER_MODE_VISUAL,
    custom_html: Optional[str] = None
) -> str:
    """
    Full HTML document for a public page.

    Pages built in HTML mode are served as their custom markup. Visual pages
    get the site header, the rendered composition and the footer.
    """
    if builder_mode == BUILDER_MODE_HTML and custom_html:
        return custom_html

    rendered = render_public(document, viewport_width, title=title)
    safe_title = html.escape(title)
    year = datetime.now().year
    return f'''<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>{safe_title}</title>
</head>
<body class="public-page" data-breakpoint="{rendered.breakpoint.value}">
    <header class="public-header">
        <div class="header-info">
            <span class="header-brand">{safe_title}</span>
            <span class="header-subtitle">Powered by Page Builder</span>
        </div>
    </header>
    {rendered.html}
    <footer class="public-footer">
        <p>&copy; {year} Page Builder. All rights reserved.</p>
    </footer>
</body>
</html>'''

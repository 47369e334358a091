"""
Badge routes.

GET /badge  → themed HTML fragment for the embeddable widget
GET /       → demo page embedding the widget in every language/theme
"""

from typing import Literal

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from api.dependencies import get_metric_source
from badge.renderer import THEMES, loading_badge, refresh_badge, render_badge
from badge.sources import MetricSource

router = APIRouter(tags=["badge"])

# Templates instance is set by create_app() after mounting.
_templates: Jinja2Templates | None = None


def set_templates(t: Jinja2Templates) -> None:
    global _templates
    _templates = t


def _tmpl() -> Jinja2Templates:
    if _templates is None:
        raise RuntimeError("Templates not initialised; call set_templates() first")
    return _templates


@router.get("/badge", response_class=HTMLResponse, summary="Rendered badge fragment")
def badge_fragment(
    lang: Literal["en", "fr"] = Query("en", description="Label language"),
    theme: Literal["light", "dark", "auto"] = Query("auto", description="Colour theme"),
    state: Literal["loading", "rendered"] = Query("rendered", description="Row state to render"),
    source: MetricSource = Depends(get_metric_source),
) -> HTMLResponse:
    """Render the badge; metrics that fail fall back to static values."""
    if state == "loading":
        badge = loading_badge(lang, theme)
    else:
        badge = refresh_badge(source, lang, theme)
    return HTMLResponse(
        content=render_badge(badge),
        headers={"Cache-Control": "no-store"},
    )


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
def demo(request: Request) -> HTMLResponse:
    """Demo page showing the embedded widget."""
    variants = [(lang, theme) for lang in ("en", "fr") for theme in THEMES]
    return _tmpl().TemplateResponse(
        request,
        "demo.html",
        {"api_base": str(request.base_url).rstrip("/"), "variants": variants},
    )

"""FastAPI web view over the citation cache."""

import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from citebot.config import Settings
from citebot.database.repository import CitationCache
from citebot.gui.helpers import (
    first_sentence,
    format_timestamp,
    highlight,
    paper_to_dict,
    parse_page,
    total_pages,
)


class AppState:
    """Runtime services shared by the request handlers."""

    settings: Settings
    cache: Optional[CitationCache] = None


state = AppState()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the cache on startup and close it on shutdown."""
    state.settings = Settings.load()
    state.cache = CitationCache(state.settings.db_path)
    yield
    state.cache.close()
    state.cache = None


# Setup templates
base_dir = os.path.dirname(__file__)
templates = Jinja2Templates(directory=os.path.join(base_dir, "templates"))
templates.env.filters["first_sentence"] = first_sentence
templates.env.filters["highlight"] = highlight
templates.env.filters["format_timestamp"] = format_timestamp

app = FastAPI(lifespan=lifespan)


def _load_page(page: int, q: str) -> dict:
    """Papers and pagination info for one page of results."""
    page_size = state.settings.page_size
    total = state.cache.count(q)
    papers = state.cache.find_page(query=q, limit=page_size, offset=(page - 1) * page_size)
    return {
        "papers": papers,
        "count": total,
        "current_page": page,
        "total_pages": total_pages(total, page_size),
        "page_size": page_size,
    }


@app.get("/", response_class=HTMLResponse)
async def index(
    request: Request,
    page: Optional[str] = Query(None, description="Page number"),
    q: str = Query("", description="Search query"),
):
    """Paginated, searchable paper table."""
    data = _load_page(parse_page(page), q.strip())
    return templates.TemplateResponse(
        request,
        "index.html",
        {"request": request, "search_query": q.strip(), **data},
    )


@app.get("/api/papers")
async def papers_api(
    page: Optional[str] = Query(None, description="Page number"),
    q: str = Query("", description="Search query"),
):
    """Same data as the index page, as JSON."""
    data = _load_page(parse_page(page), q.strip())
    return JSONResponse(
        {
            "papers": [paper_to_dict(p) for p in data["papers"]],
            "count": data["count"],
            "currentPage": data["current_page"],
            "totalPages": data["total_pages"],
            "pageSize": data["page_size"],
        }
    )


@app.get("/refresh")
async def refresh():
    """Reload the index page."""
    return RedirectResponse(url="/", status_code=303)

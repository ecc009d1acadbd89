"""FastAPI-powered web console for running SQL against the configured database."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

from fastapi import FastAPI, Form, HTTPException, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from jinja2 import TemplateError
from pydantic import BaseModel, Field

from sqlconsole.core.cli import build_parser, load_cli_settings
from sqlconsole.core.config import Settings, load_settings
from sqlconsole.core.dependencies import build_dependencies
from sqlconsole.core.logging_utils import configure_logging
from sqlconsole.core.results import PageRender

LOGGER = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"
PAGE_TEMPLATE = "index.html"


class StatementRequest(BaseModel):
    sql: str = Field(..., description="SQL text passed to the database unchanged")


class PageRenderResponse(BaseModel):
    sql: str
    status: Literal["rows", "ok", "error"]
    columns: list[str] = Field(default_factory=list)
    rows: list[list[str]] = Field(default_factory=list)
    error: str | None = None
    rows_affected: int | None = None

    @classmethod
    def from_page(cls, page: PageRender) -> "PageRenderResponse":
        result = page.result
        if result is None:
            return cls(sql=page.sql, status="ok")
        grid = result.grid
        return cls(
            sql=page.sql,
            status=result.status,
            columns=list(grid.columns) if grid is not None else [],
            rows=[list(row) for row in grid.rows] if grid is not None else [],
            error=result.error,
            rows_affected=result.rows_affected,
        )


def create_app(
    config_path: str = "configs/dev.yaml",
    *,
    settings: Settings | None = None,
) -> FastAPI:
    if settings is None:
        LOGGER.info("Initialising web console with config '%s'", config_path)
        settings = load_settings(config_path)
    dependencies = build_dependencies(settings)
    service = dependencies.build_service(settings)
    templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

    app = FastAPI(title="SQL Console", version="0.1.0")
    app.state.settings = settings
    app.state.dependencies = dependencies
    app.state.service = service

    def render_page(request: Request, page: PageRender | None) -> HTMLResponse:
        try:
            return templates.TemplateResponse(
                request,
                PAGE_TEMPLATE,
                {"page": page, "row_limit": service.row_limit},
            )
        except TemplateError as exc:
            LOGGER.exception("Failed to render %s", PAGE_TEMPLATE)
            raise HTTPException(status_code=500, detail=f"failed to build page: {exc}") from exc

    @app.get("/", response_class=HTMLResponse)
    @app.get("/index.html", response_class=HTMLResponse)
    def index(request: Request) -> HTMLResponse:
        return render_page(request, None)

    @app.get("/api/health")
    def healthcheck() -> dict[str, str]:  # pragma: no cover - trivial
        return {"status": "ok"}

    @app.post("/query", response_class=HTMLResponse)
    def query_page(request: Request, sql: str | None = Form(None)) -> HTMLResponse:
        page = service.query(_require_sql(sql))
        return render_page(request, page)

    @app.post("/execute", response_class=HTMLResponse)
    def execute_page(request: Request, sql: str | None = Form(None)) -> HTMLResponse:
        page = service.execute(_require_sql(sql))
        return render_page(request, page)

    @app.post("/api/query", response_model=PageRenderResponse)
    def query_api(payload: StatementRequest) -> PageRenderResponse:
        return PageRenderResponse.from_page(service.query(payload.sql))

    @app.post("/api/execute", response_model=PageRenderResponse)
    def execute_api(payload: StatementRequest) -> PageRenderResponse:
        return PageRenderResponse.from_page(service.execute(payload.sql))

    return app


def _require_sql(sql: str | None) -> str:
    if sql is None:
        LOGGER.warning("Rejected request without an 'sql' form field")
        raise HTTPException(status_code=400, detail="error parsing form: missing 'sql' field")
    return sql


def main() -> None:
    args = build_parser("Launch the SQL web console").parse_args()

    configure_logging(debug=args.debug)
    settings = load_cli_settings(args)
    app = create_app(settings=settings)

    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover - defensive
        raise SystemExit("uvicorn must be installed to run the web console") from exc

    LOGGER.info(
        "Starting uvicorn on %s:%s (rows_limit=%s)",
        settings.server.host,
        settings.server.port,
        settings.query.rows_limit,
    )
    uvicorn.run(app, host=settings.server.host, port=settings.server.port)


if __name__ == "__main__":
    main()

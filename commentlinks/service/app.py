"""FastAPI application entrypoint for commentlinks service mode."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..errors import ConfigurationError
from ..models import CheckReport, RepoIdentity
from ..orchestrator import CheckRequest, Orchestrator


class CheckPayload(BaseModel):
    path: str
    repository: Optional[str] = None
    commit_sha: Optional[str] = None
    changed_files: Optional[List[str]] = None
    diff_base: Optional[str] = None


class LinkPayload(BaseModel):
    filename: str
    text: str
    kind: str
    valid: bool
    resolved_path: Optional[str] = None
    status_code: Optional[int] = None
    message: Optional[str] = None


class CheckResponse(BaseModel):
    variant: str
    link_count: int
    broken_count: int
    links: List[LinkPayload]
    markdown: str


class HealthResponse(BaseModel):
    status: str


def _default_orchestrator() -> Orchestrator:
    return Orchestrator()


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing the link check (reports are never posted)."""

    app = FastAPI(title="commentlinks", version="0.1.0")

    async def get_orchestrator() -> Orchestrator:
        # One orchestrator per request.
        return orchestrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/check", response_model=CheckResponse)
    async def check(
        payload: CheckPayload,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> CheckResponse:
        def _run() -> CheckReport:
            if payload.changed_files is None:
                outcome = orchestrator.run_check(
                    payload.path,
                    diff_base=payload.diff_base,
                    repository=payload.repository,
                    commit_sha=payload.commit_sha,
                    dry_run=True,
                )
                return outcome.report
            if not payload.repository or not payload.commit_sha:
                raise ConfigurationError("repository and commit_sha are required with changed_files")
            try:
                identity = RepoIdentity.parse(payload.repository, payload.commit_sha)
            except ValueError as exc:
                raise ConfigurationError(str(exc)) from exc
            request = CheckRequest(
                root=Path(payload.path).expanduser().resolve(),
                changed_files=list(payload.changed_files),
                repository=identity,
            )
            return orchestrator.run(request)

        loop = asyncio.get_running_loop()
        report = await loop.run_in_executor(None, _run)
        return _to_response(report)

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(
        _: Any, exc: ConfigurationError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def _to_response(report: CheckReport) -> CheckResponse:
    return CheckResponse(
        variant=report.variant.value,
        link_count=report.link_count,
        broken_count=len(report.broken_links),
        links=[
            LinkPayload(
                filename=item.filename,
                text=item.link.text,
                kind=item.link.kind.value,
                valid=item.outcome.valid,
                resolved_path=item.outcome.resolved_path,
                status_code=item.outcome.status_code,
                message=item.outcome.message,
            )
            for item in report.links
        ],
        markdown=report.markdown,
    )


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app()
    uvicorn.run(app, host=host, port=port)

"""FastAPI application entrypoint for eodoc service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, List, Literal, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .. import __version__
from ..config import ConfigError, load_config
from ..emitters.summary import SummaryValidationError
from ..engine import DocsEngine, DocsResult
from ..transform import TransformError


class DocsRequest(BaseModel):
    target: str
    on_transform_error: Optional[Literal["fail", "skip"]] = None


class DocsResponse(BaseModel):
    status: str
    output_dir: str
    summary_path: str
    artifacts: int
    packages: List[str]
    failed: List[str]


class HealthResponse(BaseModel):
    status: str


def _default_engine_factory(request: DocsRequest) -> DocsEngine:
    config = load_config(request.target).with_overrides(
        on_transform_error=request.on_transform_error
    )
    return DocsEngine(config=config)


def create_app(
    engine_factory: Callable[[DocsRequest], DocsEngine] = _default_engine_factory,
) -> FastAPI:
    """Create the FastAPI application exposing documentation generation."""

    app = FastAPI(title="eodoc Service", version=__version__)

    async def get_engine_factory() -> Callable[[DocsRequest], DocsEngine]:
        return engine_factory

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/docs", response_model=DocsResponse)
    async def generate(
        payload: DocsRequest,
        factory: Callable[[DocsRequest], DocsEngine] = Depends(get_engine_factory),
    ) -> DocsResponse:
        def _run() -> DocsResult:
            # A fresh engine per request keeps runs independent.
            return factory(payload).run(payload.target)

        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, _run)
        return DocsResponse(
            status="partial" if result.failed else "ok",
            output_dir=str(result.output_dir),
            summary_path=str(result.summary_path),
            artifacts=result.artifacts,
            packages=result.packages,
            failed=result.failed,
        )

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(_: Any, exc: FileNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(OSError)
    async def os_error_handler(_: Any, exc: OSError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ConfigError)
    @app.exception_handler(TransformError)
    @app.exception_handler(SummaryValidationError)
    async def generation_error_handler(_: Any, exc: Exception) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    import uvicorn

    uvicorn.run(create_app(), host=host, port=port)

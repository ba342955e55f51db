"""Production-only fallback that serves the compiled single-page app."""

from pathlib import Path

from fastapi import FastAPI, HTTPException
from fastapi.responses import FileResponse

from .logger import get_logger

logger = get_logger(__name__)


def mount_spa(app: FastAPI, build_dir: Path) -> bool:
    """
    Register a catch-all ``GET`` route serving files from ``build_dir``.

    Existing files are returned as-is, every other path gets ``index.html`` so
    client-side routing works. Must be called after the API routes are added.
    Returns False (and mounts nothing) when there is no ``index.html``.
    """
    build_dir = Path(build_dir).resolve()
    index_file = build_dir / "index.html"
    if not index_file.is_file():
        logger.warning("No SPA bundle at %s, static serving disabled", build_dir)
        return False

    @app.get("/{full_path:path}", include_in_schema=False)
    async def serve_spa(full_path: str):
        if full_path == "api" or full_path.startswith("api/"):
            raise HTTPException(status_code=404, detail="Not Found")
        candidate = (build_dir / full_path).resolve()
        if full_path and candidate.is_relative_to(build_dir) and candidate.is_file():
            return FileResponse(candidate)
        return FileResponse(index_file)

    logger.info("Serving SPA bundle from %s", build_dir)
    return True

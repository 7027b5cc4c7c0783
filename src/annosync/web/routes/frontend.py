"""Index page, mode flag and the static Recogito frontend."""

from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import FileResponse, HTMLResponse, JSONResponse

from annosync.core.ports.config_provider import AppConfig

router = APIRouter()

# Files served from ``<frontend>/recogito`` and their content types.
RECOGITO_ASSETS = {
    "recogito.min.css": "text/css",
    "recogito.min.css.map": "application/json",
    "recogito.min.js": "text/javascript",
    "recogito.min.js.map": "application/json",
}


def _read(path: Path) -> str:
    """Read a text file or answer 404."""

    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise HTTPException(status_code=404, detail=f"Missing {path.name}") from exc


@router.get("/")
def index(request: Request) -> HTMLResponse:
    """Render ``index.html`` with the reference document inlined.

    The ``{DOCUMENT}`` placeholder of the template is replaced by the
    configured document.
    """

    config: AppConfig = request.app.state.config
    template = _read(config.server.frontend_dir / "index.html")
    document = _read(config.server.document)
    return HTMLResponse(template.replace("{DOCUMENT}", document))


@router.get("/mode")
def mode(request: Request) -> JSONResponse:
    """Tell the frontend whether annotations can be edited."""

    config: AppConfig = request.app.state.config
    return JSONResponse({"readOnly": config.read_only})


@router.get("/recogito/{asset}")
def recogito_asset(asset: str, request: Request) -> FileResponse:
    """Serve one of the bundled Recogito files."""

    # Only known file names are served.
    media_type = RECOGITO_ASSETS.get(asset)
    if media_type is None:
        raise HTTPException(status_code=404, detail=f"Unknown asset: {asset}")

    config: AppConfig = request.app.state.config
    path = config.server.frontend_dir / "recogito" / asset
    if not path.is_file():
        raise HTTPException(status_code=404, detail=f"Missing {asset}")
    return FileResponse(path, media_type=media_type)


@router.get("/favicon.ico")
def favicon(request: Request) -> FileResponse:
    """Serve the favicon."""

    config: AppConfig = request.app.state.config
    path = config.server.frontend_dir / "assets" / "favicon.ico"
    if not path.is_file():
        raise HTTPException(status_code=404, detail="Missing favicon.ico")
    return FileResponse(path, media_type="image/x-icon")

"""Annotation routes backed by the sync engines."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse, Response

from annosync.application.sync import AnnotationSyncEngine, SyncOutcome
from annosync.core.domain.annotation import Annotation
from annosync.core.exceptions import AnnotationDecodeError
from annosync.core.ports.config_provider import AppConfig

router = APIRouter()


def get_engine(
    request: Request,
    workflow: str = Query(AppConfig.DEFAULT_WORKFLOW),
) -> AnnotationSyncEngine:
    """Return the engine of the requested workflow.

    Args:
        request: Incoming request, used to reach the app state.
        workflow: Workflow name (``annotation`` or ``validation``).

    Returns:
        The workflow's sync engine.
    """

    engines: dict[str, AnnotationSyncEngine] = request.app.state.engines
    if workflow not in engines:
        raise HTTPException(status_code=404, detail=f"Unknown workflow: {workflow}")
    return engines[workflow]


def require_write_access(request: Request) -> None:
    """Reject write requests when the server runs read-only."""

    config: AppConfig = request.app.state.config
    if config.read_only:
        raise HTTPException(status_code=403, detail="Server is in read-only mode")


@router.get("/annotations")
def list_annotations(
    engine: AnnotationSyncEngine = Depends(get_engine),
) -> JSONResponse:
    """List stored annotations with ``meta`` set from the issue state.

    Tracker failures propagate to the app's error handler (502).
    """

    annotations = engine.list_annotations()
    return JSONResponse([annotation.to_dict() for annotation in annotations])


@router.post("/annotation", dependencies=[Depends(require_write_access)])
def post_annotation(
    payload: Any = Body(...),
    engine: AnnotationSyncEngine = Depends(get_engine),
) -> Response:
    """Create or update the issue storing an annotation.

    Args:
        payload: Annotation in its wire shape; ``meta`` is ignored.
        engine: Sync engine of the requested workflow.

    Returns:
        Empty response with 201 (created), 202 (updated) or 406 (failed).
    """

    try:
        annotation = Annotation.from_dict(payload)
    except AnnotationDecodeError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    result = engine.upsert(annotation)
    return Response(status_code=result.outcome.status_code)


@router.delete("/annotation")
def delete_annotation(
    request: Request,
    workflow: str = Query(AppConfig.DEFAULT_WORKFLOW),
) -> Response:
    """Deleting annotations is not supported (501), whatever the workflow."""

    engines: dict[str, AnnotationSyncEngine] = request.app.state.engines
    engine = engines.get(workflow)
    if engine is None:
        return Response(status_code=SyncOutcome.NOT_IMPLEMENTED.status_code)
    return Response(status_code=engine.delete().outcome.status_code)

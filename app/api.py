"""HTTP route definitions for the service."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.schemas import SnapshotResponse
from services.exporter import CSV_MEDIA_TYPE, export_filename, serialize
from services.poller import Poller, build_default_poller

router = APIRouter()


def get_poller() -> Poller:
    return build_default_poller()


@router.get(
    "/snapshot",
    response_model=SnapshotResponse,
    summary="Current readings, statistics, trends and alerts.",
)
async def get_snapshot(poller: Poller = Depends(get_poller)) -> SnapshotResponse:
    return SnapshotResponse.from_snapshot(poller.snapshot())


@router.post(
    "/refresh",
    response_model=SnapshotResponse,
    summary="Force a refresh cycle and return the resulting snapshot.",
)
async def refresh(poller: Poller = Depends(get_poller)) -> SnapshotResponse:
    await poller.refresh()
    return SnapshotResponse.from_snapshot(poller.snapshot())


@router.post(
    "/alerts/dismiss",
    response_model=SnapshotResponse,
    summary="Hide the visible alert until the next one fires.",
)
async def dismiss_alert(poller: Poller = Depends(get_poller)) -> SnapshotResponse:
    poller.dismiss_alert()
    return SnapshotResponse.from_snapshot(poller.snapshot())


@router.get(
    "/export",
    summary="Download the current readings as CSV.",
    response_class=Response,
)
async def export_csv(poller: Poller = Depends(get_poller)) -> Response:
    snapshot = poller.snapshot()
    if not snapshot.readings:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No readings available to export.",
        )
    return Response(
        content=serialize(snapshot.readings),
        media_type=CSV_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{export_filename()}"'},
    )


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}

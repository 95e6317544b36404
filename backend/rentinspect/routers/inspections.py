"""Inspections router - photos and reports."""

import io
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from fastapi.responses import StreamingResponse
from pydantic import ValidationError

from rentinspect.core.security import get_current_actor
from rentinspect.models.user import User
from rentinspect.routers.deps import (
    get_inspection_service,
    get_report_compiler,
    get_upload_receiver_dep,
)
from rentinspect.schemas.inspection import (
    InspectionResponse,
    PhotoCreate,
    PhotoResponse,
    RoomGroup,
)
from rentinspect.schemas.report import ReportArtifactRef
from rentinspect.services.inspections import InspectionService
from rentinspect.services.report_compiler import ReportCompiler
from rentinspect.services.uploads import UploadReceiver
from rentinspect.services.visibility import Permission, require_permission

router = APIRouter(prefix="/inspections", tags=["inspections"])


@router.get("", response_model=List[InspectionResponse])
async def list_inspections(
    service: InspectionService = Depends(get_inspection_service),
    actor: User = Depends(get_current_actor),
):
    """List inspections of every property visible to the current user."""
    return await service.list_visible_inspections(actor)


@router.get("/{inspection_id}", response_model=InspectionResponse)
async def get_inspection(
    inspection_id: UUID,
    service: InspectionService = Depends(get_inspection_service),
    actor: User = Depends(get_current_actor),
):
    return await service.get_inspection_if_visible(actor, inspection_id)


@router.get("/{inspection_id}/photos", response_model=List[RoomGroup])
async def list_photos(
    inspection_id: UUID,
    service: InspectionService = Depends(get_inspection_service),
    actor: User = Depends(get_current_actor),
):
    """Photos grouped by room, in the same order the report uses."""
    groups = await service.get_grouped_photos(actor, inspection_id)
    return [
        RoomGroup(
            room=group.room,
            photos=[PhotoResponse.model_validate(p) for p in group.photos],
        )
        for group in groups
    ]


@router.post(
    "/{inspection_id}/photos",
    response_model=PhotoResponse,
    status_code=status.HTTP_201_CREATED,
)
async def upload_photo(
    inspection_id: UUID,
    room: str = Form(...),
    comment: Optional[str] = Form(None),
    file: UploadFile = File(...),
    service: InspectionService = Depends(get_inspection_service),
    receiver: UploadReceiver = Depends(get_upload_receiver_dep),
    actor: User = Depends(get_current_actor),
):
    """Upload a photo for a room of a draft inspection (admins and inspectors)."""
    try:
        data = PhotoCreate(room=room, comment=comment)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.errors())

    # Authorize before accepting any bytes
    require_permission(actor, Permission.PHOTO_CREATE)
    await service.get_inspection_if_visible(actor, inspection_id)

    try:
        handle = await receiver.receive_upload(
            file.file,
            content_type=file.content_type or "",
            original_name=file.filename,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    try:
        return await service.add_photo(actor, inspection_id, data, handle)
    except Exception:
        await receiver.discard(handle)
        raise


@router.post("/{inspection_id}/report", response_model=ReportArtifactRef)
async def build_report(
    inspection_id: UUID,
    compiler: ReportCompiler = Depends(get_report_compiler),
    actor: User = Depends(get_current_actor),
):
    """Get or build the inspection report. Returns once it is published."""
    return await compiler.get_or_build(actor, inspection_id)


@router.get("/{inspection_id}/report.pdf")
async def download_report(
    inspection_id: UUID,
    compiler: ReportCompiler = Depends(get_report_compiler),
    actor: User = Depends(get_current_actor),
):
    pdf = await compiler.open_artifact(actor, inspection_id)
    headers = {"Content-Disposition": f'inline; filename="inspection_{inspection_id}_report.pdf"'}
    return StreamingResponse(io.BytesIO(pdf), media_type="application/pdf", headers=headers)

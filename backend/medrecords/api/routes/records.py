"""
Medical Records API routes.

Endpoints:
    POST /records    — Insert a patient with all of its child records
    POST /addRecord  — Overwrite one visit/treatment/diagnostic entry
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from medrecords.db.session import get_db
from medrecords.schemas import Record, RecordUpdate
from medrecords.services import record_service

router = APIRouter()


@router.post("/records", response_model=Record, status_code=status.HTTP_201_CREATED)
async def create_record(
    payload: Record,
    db: AsyncSession = Depends(get_db),
):
    """Insert a full record in a single transaction and echo it back."""
    return await record_service.create_record(db, payload)


@router.post("/addRecord", response_class=PlainTextResponse)
async def update_record(
    payload: RecordUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update the child entry matching (patientId, type, record.date).

    A payload that matches no existing entry still reports success.
    """
    await record_service.update_record(db, payload.root)
    return "Record updated successfully"

"""
Search API routes.

Endpoints:
    GET /search?patientId=&hospital=  — Aggregated records by patient and/or hospital
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from medrecords.db.session import get_db
from medrecords.schemas import Record
from medrecords.services import search_service

router = APIRouter()


@router.get("/search", response_model=list[Record])
async def search_records(
    patient_id: Optional[str] = Query(None, alias="patientId", description="Patient ID"),
    hospital: Optional[str] = Query(None, description="Hospital name in any visit, treatment or diagnostic"),
    db: AsyncSession = Depends(get_db),
):
    """Search patient records by patient ID and/or hospital.

    Returns 400 when neither filter is given and 404 when nothing matches.
    """
    return await search_service.search_records(db, patient_id=patient_id, hospital=hospital)

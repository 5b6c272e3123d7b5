"""
Patient API routes.

Endpoints:
    GET  /patients/{id}    — Get patient by ID
    PUT  /patients/{id}    — Overwrite patient name and age
"""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field, StrictInt
from sqlalchemy.ext.asyncio import AsyncSession

from medrecords.db.session import get_db
from medrecords.exceptions import NotFound
from medrecords.schemas import Patient
from medrecords.services import patient_service

router = APIRouter()


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------

class PatientUpdateRequest(BaseModel):
    name: str
    age: StrictInt = Field(..., ge=0)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("/patients/{patient_id}", response_model=Patient)
async def get_patient(
    patient_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Get patient details."""
    patient = await patient_service.get_patient(db, patient_id)
    if patient is None:
        raise NotFound("Patient not found")
    return patient


@router.put("/patients/{patient_id}", response_class=PlainTextResponse)
async def update_patient(
    patient_id: str,
    payload: PatientUpdateRequest,
    db: AsyncSession = Depends(get_db),
):
    """Overwrite a patient's name and age."""
    await patient_service.update_patient(db, patient_id, name=payload.name, age=payload.age)
    return "Patient information updated successfully"

"""
Patient service — read and overwrite the patient row itself.

All public functions accept an ``AsyncSession`` so the caller (route layer)
controls which session is used.
"""

from __future__ import annotations

import logging

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from medrecords.exceptions import StoreFailure
from medrecords.models import Patient
from medrecords.schemas import Patient as PatientSchema

logger = logging.getLogger(__name__)


async def get_patient(db: AsyncSession, patient_id: str) -> PatientSchema | None:
    """Return a single patient by primary key, or ``None``."""
    try:
        result = await db.execute(select(Patient).where(Patient.id == patient_id))
    except SQLAlchemyError as exc:
        raise StoreFailure(str(exc)) from exc
    patient = result.scalar_one_or_none()
    if patient is None:
        return None
    return PatientSchema.model_validate(patient)


async def update_patient(db: AsyncSession, patient_id: str, *, name: str, age: int) -> int:
    """Overwrite name and age. Returns the number of rows changed (0 if unknown)."""
    stmt = update(Patient).where(Patient.id == patient_id).values(name=name, age=age)
    try:
        async with db.begin():
            result = await db.execute(stmt)
    except SQLAlchemyError as exc:
        logger.error("Failed to update patient %s: %s", patient_id, exc)
        raise StoreFailure(str(exc)) from exc

    if result.rowcount == 0:
        logger.warning("Patient %s not found; nothing updated", patient_id)
    else:
        logger.info("Updated patient %s", patient_id)
    return result.rowcount

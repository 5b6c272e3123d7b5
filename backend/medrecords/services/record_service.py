"""
Record service — transactional insert of a full Record and the
single-kind child update behind ``POST /addRecord``.

Both operations own their transaction (``async with db.begin()``), so the
session passed in must not have one open yet.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from medrecords.exceptions import StoreFailure
from medrecords.models import Patient, Visit, Treatment, Diagnostic
from medrecords.schemas import (
    ChildUpdate,
    DiagnosticRecord,
    Record,
    RecordKind,
    TreatmentRecord,
    VisitRecord,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _visit_columns(visit: VisitRecord) -> dict[str, Any]:
    return {
        "date": visit.date,
        "reason": visit.reason,
        "doctor_name": visit.doctor_name,
        "hospital": visit.hospital,
    }


def _treatment_columns(treatment: TreatmentRecord) -> dict[str, Any]:
    return {
        "date": treatment.date,
        "treatment": treatment.treatment,
        "outcome": treatment.outcome,
        "hospital": treatment.hospital,
    }


def _diagnostic_columns(diagnostic: DiagnosticRecord) -> dict[str, Any]:
    return {
        "date": diagnostic.date,
        "diagnosis": diagnostic.diagnosis,
        "specialist": diagnostic.specialist,
        "hospital": diagnostic.hospital,
    }


_TABLES = {
    RecordKind.VISIT: (Visit, _visit_columns),
    RecordKind.TREATMENT: (Treatment, _treatment_columns),
    RecordKind.DIAGNOSTIC: (Diagnostic, _diagnostic_columns),
}


async def _insert_rows(db: AsyncSession, step: str, rows: list[Any]) -> None:
    if not rows:
        return
    db.add_all(rows)
    try:
        await db.flush()
    except SQLAlchemyError as exc:
        logger.error("%s: %s", step, exc)
        raise StoreFailure(f"{step}: {exc}") from exc


# ---------------------------------------------------------------------------
# Insert
# ---------------------------------------------------------------------------

async def create_record(db: AsyncSession, record: Record) -> Record:
    """Insert the patient and all child rows as one all-or-nothing unit.

    Child rows go in input order. Any failure rolls the whole transaction back
    and raises :class:`StoreFailure` naming the step that failed.
    """
    patient_id = record.patient.id
    try:
        async with db.begin():
            await _insert_rows(db, "Failed to insert new patient", [
                Patient(id=patient_id, name=record.patient.name, age=record.patient.age),
            ])
            await _insert_rows(db, "Failed to insert visits", [
                Visit(patient_id=patient_id, **_visit_columns(v)) for v in record.visit_records
            ])
            await _insert_rows(db, "Failed to insert treatments", [
                Treatment(patient_id=patient_id, **_treatment_columns(t)) for t in record.treatment_records
            ])
            await _insert_rows(db, "Failed to insert diagnostics", [
                Diagnostic(patient_id=patient_id, **_diagnostic_columns(d)) for d in record.diagnostic_records
            ])
    except SQLAlchemyError as exc:
        logger.error("Commit failed for patient %s: %s", patient_id, exc)
        raise StoreFailure(f"Failed to commit transaction: {exc}") from exc

    logger.info(
        "Created record for patient %s (%d visits, %d treatments, %d diagnostics)",
        patient_id,
        len(record.visit_records),
        len(record.treatment_records),
        len(record.diagnostic_records),
    )
    return record


# ---------------------------------------------------------------------------
# Single-kind update
# ---------------------------------------------------------------------------

async def update_record(db: AsyncSession, change: ChildUpdate) -> int:
    """Overwrite the child row of ``change.type`` identified by (patient_id, record.date).

    Returns the number of rows changed. A payload that matches no row is not
    an error; the count is simply 0.
    """
    kind = RecordKind(change.type)
    patient_id = change.patient_id
    child = change.record
    table, columns = _TABLES[kind]

    stmt = (
        update(table)
        .where(table.patient_id == patient_id, table.date == child.date)
        .values(**columns(child))
    )
    try:
        async with db.begin():
            result = await db.execute(stmt)
    except SQLAlchemyError as exc:
        logger.error("Failed to update %s for patient %s: %s", kind.value, patient_id, exc)
        raise StoreFailure(f"Failed to update {kind.value} record: {exc}") from exc

    if result.rowcount == 0:
        logger.warning(
            "No %s row for patient %s on %s; nothing updated", kind.value, patient_id, child.date
        )
    else:
        logger.info("Updated %d %s row(s) for patient %s", result.rowcount, kind.value, patient_id)
    return result.rowcount

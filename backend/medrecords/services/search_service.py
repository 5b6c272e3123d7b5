"""
Search service — builds the patient/child LEFT JOIN and folds the flat
result set back into one :class:`Record` per patient.

The join yields one row per (visit, treatment, diagnostic) combination of a
patient, with the child columns NULL where a table has no match. Rows are
folded as follows:

* the first row seen for a patient id opens a new Record;
* a child column set with an empty (or NULL) date is a LEFT JOIN artifact
  and is dropped;
* a child row is appended only the first time its primary key is seen for
  that patient, so the cross product does not multiply entries.

Child sequences keep first-arrival order, and Records are emitted in the
order their patient first appeared.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from sqlalchemy import Select, and_, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from medrecords.exceptions import InvalidArgument, MalformedResult, NotFound, StoreFailure
from medrecords.models import Patient, Visit, Treatment, Diagnostic
from medrecords.schemas import (
    Patient as PatientSchema,
    Record,
    RecordKind,
    VisitRecord,
    TreatmentRecord,
    DiagnosticRecord,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Query builder
# ---------------------------------------------------------------------------

def build_search_query(patient_id: str | None = None, hospital: str | None = None) -> Select:
    """Return the join statement for the given filters, with all values bound.

    Raises :class:`InvalidArgument` when neither filter is supplied.
    """
    if not patient_id and not hospital:
        raise InvalidArgument("Please provide either a patientId or hospital parameter")

    stmt = (
        select(
            Patient.id.label("id"),
            Patient.name.label("name"),
            Patient.age.label("age"),
            Visit.id.label("visit_id"),
            Visit.date.label("visit_date"),
            Visit.reason.label("reason"),
            Visit.doctor_name.label("doctor_name"),
            Visit.hospital.label("visit_hospital"),
            Treatment.id.label("treatment_id"),
            Treatment.date.label("treatment_date"),
            Treatment.treatment.label("treatment"),
            Treatment.outcome.label("outcome"),
            Treatment.hospital.label("treatment_hospital"),
            Diagnostic.id.label("diagnostic_id"),
            Diagnostic.date.label("diagnostic_date"),
            Diagnostic.diagnosis.label("diagnosis"),
            Diagnostic.specialist.label("specialist"),
            Diagnostic.hospital.label("diagnostic_hospital"),
        )
        .select_from(Patient)
        .outerjoin(Visit, Patient.id == Visit.patient_id)
        .outerjoin(Treatment, Patient.id == Treatment.patient_id)
        .outerjoin(Diagnostic, Patient.id == Diagnostic.patient_id)
    )

    conditions = []
    if patient_id:
        conditions.append(Patient.id == patient_id)
    if hospital:
        conditions.append(
            or_(
                Visit.hospital == hospital,
                Treatment.hospital == hospital,
                Diagnostic.hospital == hospital,
            )
        )
    return stmt.where(and_(*conditions))


# ---------------------------------------------------------------------------
# Row decoding
# ---------------------------------------------------------------------------

def _column(row: Mapping[str, Any], key: str) -> Any:
    try:
        return row[key]
    except KeyError:
        raise MalformedResult(f"Failed to parse database results: missing column '{key}'") from None


def _text(row: Mapping[str, Any], key: str) -> str:
    """Read a text column, flattening NULL to the empty string."""
    value = _column(row, key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise MalformedResult(
            f"Failed to parse database results: column '{key}' is {type(value).__name__}, expected str"
        )
    return value


def _age(row: Mapping[str, Any]) -> int:
    value = _column(row, "age")
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise MalformedResult(f"Failed to parse database results: invalid age {value!r}")
    return value


class _PatientAccumulator:
    """In-progress Record plus the child keys already folded into it."""

    def __init__(self, patient: PatientSchema):
        self.record = Record(patient=patient)
        self.seen: dict[RecordKind, set] = {kind: set() for kind in RecordKind}

    def is_new(self, kind: RecordKind, key: Any) -> bool:
        # Rows without a primary key cannot be deduplicated
        if key is None:
            return True
        if key in self.seen[kind]:
            return False
        self.seen[kind].add(key)
        return True


def aggregate_rows(rows: Iterable[Mapping[str, Any]]) -> list[Record]:
    """Fold joined rows into one Record per distinct patient id.

    Any decoding failure raises :class:`MalformedResult` and nothing is
    returned.
    """
    by_patient: dict[str, _PatientAccumulator] = {}

    for row in rows:
        patient_id = _text(row, "id")
        acc = by_patient.get(patient_id)
        if acc is None:
            acc = _PatientAccumulator(
                PatientSchema(id=patient_id, name=_text(row, "name"), age=_age(row))
            )
            by_patient[patient_id] = acc

        visit_date = _text(row, "visit_date")
        if visit_date and acc.is_new(RecordKind.VISIT, row.get("visit_id")):
            acc.record.visit_records.append(
                VisitRecord(
                    date=visit_date,
                    reason=_text(row, "reason"),
                    doctor_name=_text(row, "doctor_name"),
                    hospital=_text(row, "visit_hospital"),
                )
            )

        treatment_date = _text(row, "treatment_date")
        if treatment_date and acc.is_new(RecordKind.TREATMENT, row.get("treatment_id")):
            acc.record.treatment_records.append(
                TreatmentRecord(
                    date=treatment_date,
                    treatment=_text(row, "treatment"),
                    outcome=_text(row, "outcome"),
                    hospital=_text(row, "treatment_hospital"),
                )
            )

        diagnostic_date = _text(row, "diagnostic_date")
        if diagnostic_date and acc.is_new(RecordKind.DIAGNOSTIC, row.get("diagnostic_id")):
            acc.record.diagnostic_records.append(
                DiagnosticRecord(
                    date=diagnostic_date,
                    diagnosis=_text(row, "diagnosis"),
                    specialist=_text(row, "specialist"),
                    hospital=_text(row, "diagnostic_hospital"),
                )
            )

    return [acc.record for acc in by_patient.values()]


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------

async def search_records(
    db: AsyncSession,
    *,
    patient_id: str | None = None,
    hospital: str | None = None,
) -> list[Record]:
    """Run the join for the given filters and return the aggregated Records.

    Raises :class:`NotFound` when no patient matches.
    """
    stmt = build_search_query(patient_id, hospital)

    try:
        result = await db.execute(stmt)
    except SQLAlchemyError as exc:
        logger.error("Search query failed (patient_id=%s, hospital=%s): %s", patient_id, hospital, exc)
        raise StoreFailure(f"Database query error: {exc}") from exc

    records = aggregate_rows(result.mappings())
    if not records:
        raise NotFound("No records found")

    logger.info(
        "Search (patient_id=%s, hospital=%s) returned %d record(s)",
        patient_id, hospital, len(records),
    )
    return records

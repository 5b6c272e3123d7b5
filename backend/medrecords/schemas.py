"""
Pydantic schemas for the JSON wire format.

Attributes are snake_case in Python and camelCase on the wire
(``doctorName``, ``visitRecords``, ``patientId`` ...).
"""

import enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, RootModel, StrictInt
from pydantic.alias_generators import to_camel


class RecordKind(str, enum.Enum):
    VISIT = "visit"
    TREATMENT = "treatment"
    DIAGNOSTIC = "diagnostic"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------

class Patient(CamelModel):
    id: str
    name: str
    age: StrictInt = Field(..., ge=0)

    model_config = ConfigDict(from_attributes=True)


class VisitRecord(CamelModel):
    date: str
    reason: str
    doctor_name: str
    hospital: str


class TreatmentRecord(CamelModel):
    date: str
    treatment: str
    outcome: str
    hospital: str


class DiagnosticRecord(CamelModel):
    date: str
    diagnosis: str
    specialist: str
    hospital: str


class Record(CamelModel):
    """One patient plus its visit, treatment and diagnostic entries."""

    patient: Patient
    visit_records: list[VisitRecord] = Field(default_factory=list)
    treatment_records: list[TreatmentRecord] = Field(default_factory=list)
    diagnostic_records: list[DiagnosticRecord] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Single-kind updates (POST /addRecord), discriminated by ``type``
# ---------------------------------------------------------------------------

class VisitUpdate(CamelModel):
    patient_id: str
    type: Literal["visit"]
    record: VisitRecord


class TreatmentUpdate(CamelModel):
    patient_id: str
    type: Literal["treatment"]
    record: TreatmentRecord


class DiagnosticUpdate(CamelModel):
    patient_id: str
    type: Literal["diagnostic"]
    record: DiagnosticRecord


ChildUpdate = Union[VisitUpdate, TreatmentUpdate, DiagnosticUpdate]


class RecordUpdate(RootModel[Annotated[
    ChildUpdate,
    Field(discriminator="type"),
]]):
    """Request body of POST /addRecord; ``root`` is the payload for the kind named by ``type``."""

"""
Seed script — creates a handful of patients with visits, treatments and
diagnostics across a few hospitals.

Run from the backend directory:
    python seed.py
"""
import asyncio
import logging
import random

from medrecords.config import get_settings
from medrecords.db.session import Database
from medrecords.exceptions import StoreFailure
from medrecords.schemas import Record, Patient, VisitRecord, TreatmentRecord, DiagnosticRecord
from medrecords.services import record_service

random.seed(42)

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
logger = logging.getLogger("seed")

# ─────────────────────────────────────────────────────────────────────
#  Reference data arrays
# ─────────────────────────────────────────────────────────────────────

NAMES = ["Ann", "Ben", "Chloe", "David", "Elena", "Farid", "Grace", "Hiro"]
HOSPITALS = ["General", "St. Mary", "City Clinic", "Northside"]
DOCTORS = ["Dr. Adams", "Dr. Baker", "Dr. Chen", "Dr. Diaz"]
REASONS = ["checkup", "fever", "back pain", "follow-up", "vaccination"]
TREATMENTS = [("physiotherapy", "improved"), ("antibiotics", "resolved"), ("surgery", "stable")]
DIAGNOSES = [("hypertension", "cardiologist"), ("asthma", "pulmonologist"), ("fracture", "orthopedist")]


def _rand_date(year=2024):
    return f"{year}-{random.randint(1, 12):02d}-{random.randint(1, 28):02d}"


def generate_record(idx):
    visits = [
        VisitRecord(
            date=_rand_date(),
            reason=random.choice(REASONS),
            doctor_name=random.choice(DOCTORS),
            hospital=random.choice(HOSPITALS),
        )
        for _ in range(random.randint(0, 3))
    ]
    treatments = []
    for _ in range(random.randint(0, 2)):
        treatment, outcome = random.choice(TREATMENTS)
        treatments.append(TreatmentRecord(
            date=_rand_date(), treatment=treatment, outcome=outcome, hospital=random.choice(HOSPITALS),
        ))
    diagnostics = []
    for _ in range(random.randint(0, 2)):
        diagnosis, specialist = random.choice(DIAGNOSES)
        diagnostics.append(DiagnosticRecord(
            date=_rand_date(), diagnosis=diagnosis, specialist=specialist, hospital=random.choice(HOSPITALS),
        ))

    return Record(
        patient=Patient(id=f"p{idx}", name=NAMES[(idx - 1) % len(NAMES)], age=random.randint(1, 95)),
        visit_records=visits,
        treatment_records=treatments,
        diagnostic_records=diagnostics,
    )


async def seed(count=8):
    settings = get_settings()
    database = Database(settings.DATABASE_URL)
    await database.create_all()

    created = 0
    async with database.async_session() as db:
        for idx in range(1, count + 1):
            record = generate_record(idx)
            try:
                await record_service.create_record(db, record)
                created += 1
            except StoreFailure as exc:
                # Usually the patient already exists from a previous run
                logger.warning("Skipping %s: %s", record.patient.id, exc)

    await database.dispose()
    logger.info("Seeded %d of %d records into %s", created, count, settings.DATABASE_URL)


if __name__ == "__main__":
    asyncio.run(seed())

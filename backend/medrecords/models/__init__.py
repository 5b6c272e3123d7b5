from medrecords.models.patient import Patient
from medrecords.models.visit import Visit
from medrecords.models.treatment import Treatment
from medrecords.models.diagnostic import Diagnostic

__all__ = [
    "Patient",
    "Visit",
    "Treatment",
    "Diagnostic",
]

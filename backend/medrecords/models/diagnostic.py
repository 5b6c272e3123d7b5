from sqlalchemy import Column, String, Integer, ForeignKey

from medrecords.db.session import Base


class Diagnostic(Base):
    __tablename__ = "diagnostics"

    id = Column(Integer, primary_key=True, autoincrement=True)
    patient_id = Column(String, ForeignKey("patients.id"), nullable=False, index=True)
    date = Column(String, nullable=False)
    diagnosis = Column(String, nullable=False, default="")
    specialist = Column(String, nullable=False, default="")
    hospital = Column(String, nullable=False, default="", index=True)

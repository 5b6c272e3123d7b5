from sqlalchemy import Column, String, Integer, ForeignKey

from medrecords.db.session import Base


class Visit(Base):
    __tablename__ = "visits"

    id = Column(Integer, primary_key=True, autoincrement=True)
    patient_id = Column(String, ForeignKey("patients.id"), nullable=False, index=True)
    date = Column(String, nullable=False)  # ISO-like, e.g. "2024-01-01"
    reason = Column(String, nullable=False, default="")
    doctor_name = Column(String, nullable=False, default="")
    hospital = Column(String, nullable=False, default="", index=True)

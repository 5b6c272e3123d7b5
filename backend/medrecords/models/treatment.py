from sqlalchemy import Column, String, Integer, ForeignKey

from medrecords.db.session import Base


class Treatment(Base):
    __tablename__ = "treatments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    patient_id = Column(String, ForeignKey("patients.id"), nullable=False, index=True)
    date = Column(String, nullable=False)
    treatment = Column(String, nullable=False, default="")
    outcome = Column(String, nullable=False, default="")
    hospital = Column(String, nullable=False, default="", index=True)

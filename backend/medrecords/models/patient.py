from sqlalchemy import Column, String, Integer, CheckConstraint

from medrecords.db.session import Base


class Patient(Base):
    __tablename__ = "patients"
    __table_args__ = (CheckConstraint("age >= 0", name="ck_patients_age_non_negative"),)

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    age = Column(Integer, nullable=False)

from sqlalchemy import Column, Integer, Text
from sqlalchemy.orm import relationship
from talenthub.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    email = Column(Text, nullable=False, unique=True)
    password_hash = Column(Text, nullable=False)
    role = Column(Text, nullable=False, default="APPLICANT")
    phone = Column(Text)
    location = Column(Text)
    experience = Column(Text)
    current_role = Column(Text)
    expected_salary = Column(Text)
    available_date = Column(Text)
    portfolio = Column(Text)
    linkedin = Column(Text)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    jobs = relationship("Job", back_populates="employer", cascade="all, delete-orphan")
    applications = relationship("Application", back_populates="applicant", cascade="all, delete-orphan")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

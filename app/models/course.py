# course.py
import enum
from sqlalchemy import Column, Float, Integer, String, Text
from app.database import Base


class CourseCategory(str, enum.Enum):
    PROGRAMMING = "PROGRAMMING"
    DATA_SCIENCE = "DATA_SCIENCE"
    MATHEMATICS = "MATHEMATICS"
    BUSINESS = "BUSINESS"
    DESIGN = "DESIGN"
    LANGUAGES = "LANGUAGES"
    SCIENCE = "SCIENCE"
    OTHER = "OTHER"


class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), index=True, nullable=False)
    description = Column(Text, nullable=True)
    # Stored as the CourseCategory value.
    category = Column(String(64), nullable=True)
    level = Column(String(64), nullable=True)
    price = Column(Float, nullable=True)
    instructor_id = Column(Integer, nullable=True)

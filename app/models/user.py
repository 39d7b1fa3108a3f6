# user.py
from sqlalchemy import Column, DateTime, Integer, JSON, String, Text
from sqlalchemy.sql import func
from app.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    first_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=True)
    bio = Column(Text, nullable=True)
    # Manually entered, comma-separated ("Java, Spring Boot, SQL").
    skills = Column(Text, nullable=True)
    # Filled by bio analysis.
    extracted_skills = Column(JSON, nullable=True, default=list)
    extracted_interests = Column(JSON, nullable=True, default=list)
    personality_traits = Column(JSON, nullable=True, default=dict)
    dominant_trait = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

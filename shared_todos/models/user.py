from sqlalchemy import Column, String, DateTime
from shared_todos.database import Base

class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, index=True)
    username = Column(String(50), nullable=False)
    # Lower-cased username; uniqueness is case-insensitive
    username_key = Column(String(50), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)

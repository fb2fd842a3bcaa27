"""관리자 모델"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime

from database import Base


class Admin(Base):
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, autoincrement=True)
    login = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(64), nullable=False)  # SHA256 hex
    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<Admin {self.login}>"

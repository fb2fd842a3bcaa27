"""참가자 모델"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, Date, DateTime

from database import Base


class Participant(Base):
    __tablename__ = "participants"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)  # 소문자 정규화
    firstname = Column(String(255), nullable=False)
    lastname = Column(String(255), nullable=False)
    dob = Column(Date, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Work/Home은 FK 없이 participant_email로 연결 (삭제 후에도 soft delete 행 유지)

    def __repr__(self):
        return f"<Participant {self.email}>"

"""직장 정보 모델"""
from sqlalchemy import Column, String, Numeric

from database import Base
from models.child_record import ChildRecordMixin


class Work(ChildRecordMixin, Base):
    __tablename__ = "work"

    companyname = Column(String(255), nullable=False)
    salary = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(255), nullable=False)

    def __repr__(self):
        return f"<Work {self.participant_email} {self.companyname} deleted={self.is_deleted}>"

"""거주지 정보 모델"""
from sqlalchemy import Column, String

from database import Base
from models.child_record import ChildRecordMixin


class Home(ChildRecordMixin, Base):
    __tablename__ = "home"

    country = Column(String(255), nullable=False)
    city = Column(String(255), nullable=False)

    def __repr__(self):
        return f"<Home {self.participant_email} {self.city}, {self.country} deleted={self.is_deleted}>"

"""Work/Home 공통 컬럼 및 상태 전이

participant 이메일 하나당 최대 한 행. 상태는 absent → active ↔ soft_deleted.
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Column, Integer, String, Boolean, DateTime


class ChildState(str, Enum):
    ABSENT = "absent"
    ACTIVE = "active"
    SOFT_DELETED = "soft_deleted"


class ChildRecordMixin:
    id = Column(Integer, primary_key=True, autoincrement=True)
    participant_email = Column(String(255), unique=True, nullable=False, index=True)
    is_deleted = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def state(self) -> ChildState:
        return ChildState.SOFT_DELETED if self.is_deleted else ChildState.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.state == ChildState.ACTIVE

    def activate(self, **fields) -> None:
        """값 덮어쓰기 + 활성화 (soft delete된 행도 되살림)"""
        for name, value in fields.items():
            setattr(self, name, value)
        self.is_deleted = False

    def soft_delete(self) -> None:
        self.is_deleted = True


def child_state(record: Optional[ChildRecordMixin]) -> ChildState:
    """행이 없으면 ABSENT"""
    if record is None:
        return ChildState.ABSENT
    return record.state

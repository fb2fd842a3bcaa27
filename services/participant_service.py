"""참가자 처리 서비스

Participant 행은 email로 식별하고, Work/Home 행은 participant_email 기준으로 UPSERT한다.
한 요청의 쓰기는 하나의 세션에서 한 번에 커밋된다.
"""
import logging
from dataclasses import dataclass
from functools import wraps
from typing import Any, Dict, List, Optional, Tuple, Type, Union

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from errors import ErrorKind, Ok, Err, Result
from models.participant import Participant
from models.work import Work
from models.home import Home
from models.child_record import ChildState, child_state
from schemas import (
    ParticipantFields,
    WorkFields,
    HomeFields,
    NestedParticipantRequest,
)

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = "A participant with this email already exists."
PARTICIPANT_NOT_FOUND_MESSAGE = "Participant not found."
CHILD_CONFLICT_MESSAGE = "Work or home details for this participant were written concurrently; retry the request."


@dataclass
class ParticipantRecord:
    """참가자 + 활성 상태의 하위 정보 (없거나 삭제된 경우 None)"""
    participant: Participant
    work: Optional[Work] = None
    home: Optional[Home] = None


def conflict_message(exc: IntegrityError) -> str:
    """유니크 위반 대상 구분 (participant_email → 직장/거주지 동시 쓰기)"""
    if "participant_email" in str(exc.orig):
        return CHILD_CONFLICT_MESSAGE
    return DUPLICATE_EMAIL_MESSAGE


def storage_operation(failure_message: str):
    """DB 예외를 Err로 변환 (유니크 위반 → CONFLICT, 그 외 → SERVER_ERROR)"""
    def decorator(func):
        @wraps(func)
        async def wrapper(self, *args, **kwargs):
            try:
                return await func(self, *args, **kwargs)
            except IntegrityError as e:
                await self.db.rollback()
                logger.warning(f"Unique constraint violated: {e.orig}")
                return Err(ErrorKind.CONFLICT, conflict_message(e))
            except SQLAlchemyError:
                await self.db.rollback()
                logger.exception(failure_message)
                return Err(ErrorKind.SERVER_ERROR, failure_message)
        return wrapper
    return decorator


class ParticipantService:
    """참가자/직장/거주지 저장소 접근"""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ---------- 조회 헬퍼 ----------

    async def _find_participant(self, email: str) -> Optional[Participant]:
        result = await self.db.execute(
            select(Participant).where(Participant.email == email)
        )
        return result.scalar_one_or_none()

    async def _find_child(
        self,
        model: Type[Union[Work, Home]],
        email: str
    ) -> Optional[Union[Work, Home]]:
        result = await self.db.execute(
            select(model).where(model.participant_email == email)
        )
        return result.scalar_one_or_none()

    async def _active_child(self, model, email: str):
        record = await self._find_child(model, email)
        return record if child_state(record) == ChildState.ACTIVE else None

    async def _upsert_child(self, model, email: str, fields: Dict[str, Any]):
        """absent → active 생성, active/soft_deleted → active 갱신"""
        record = await self._find_child(model, email)
        if child_state(record) == ChildState.ABSENT:
            record = model(participant_email=email)
            self.db.add(record)
        record.activate(**fields)
        return record

    async def _write_children(
        self,
        email: str,
        work: Optional[WorkFields],
        home: Optional[HomeFields]
    ) -> Tuple[Optional[Work], Optional[Home]]:
        work_row = await self._upsert_child(Work, email, work.model_dump()) if work else None
        home_row = await self._upsert_child(Home, email, home.model_dump()) if home else None
        return work_row, home_row

    async def _commit(self, *rows) -> None:
        await self.db.commit()
        for row in rows:
            if row is not None:
                await self.db.refresh(row)

    # ---------- 생성 ----------

    @storage_operation("Could not create participant.")
    async def create(
        self,
        fields: ParticipantFields,
        work: Optional[WorkFields] = None,
        home: Optional[HomeFields] = None
    ) -> Result[ParticipantRecord]:
        """참가자 생성 (work/home이 있으면 함께 UPSERT)"""
        participant = Participant(**fields.model_dump())
        self.db.add(participant)
        # 이메일 중복은 여기서 IntegrityError
        await self.db.flush()

        work_row, home_row = await self._write_children(participant.email, work, home)
        await self._commit(participant, work_row, home_row)
        logger.info(f"Participant created: {participant.email}")
        return Ok(ParticipantRecord(participant, work_row, home_row))

    # ---------- 조회 ----------

    @storage_operation("Could not fetch participants.")
    async def list_participants(self) -> Result[List[Participant]]:
        """전체 목록 (최근 생성 순)"""
        result = await self.db.execute(
            select(Participant).order_by(Participant.id.desc())
        )
        return Ok(list(result.scalars().all()))

    @storage_operation("Could not fetch participant.")
    async def get(self, email: str) -> Result[Participant]:
        participant = await self._find_participant(email)
        if not participant:
            return Err(ErrorKind.NOT_FOUND, PARTICIPANT_NOT_FOUND_MESSAGE)
        return Ok(participant)

    @storage_operation("Could not fetch participant.")
    async def get_aggregate(self, email: str) -> Result[ParticipantRecord]:
        participant = await self._find_participant(email)
        if not participant:
            return Err(ErrorKind.NOT_FOUND, PARTICIPANT_NOT_FOUND_MESSAGE)
        return Ok(ParticipantRecord(
            participant,
            await self._active_child(Work, email),
            await self._active_child(Home, email),
        ))

    async def _get_active_child(self, model, email: str, label: str) -> Result:
        # 참가자 없음과 하위 정보 없음을 구분
        if not await self._find_participant(email):
            return Err(ErrorKind.NOT_FOUND, PARTICIPANT_NOT_FOUND_MESSAGE)
        record = await self._active_child(model, email)
        if record is None:
            return Err(ErrorKind.NOT_FOUND, f"No active {label} record for this participant.")
        return Ok(record)

    @storage_operation("Could not fetch work details.")
    async def get_work(self, email: str) -> Result[Work]:
        return await self._get_active_child(Work, email, "work")

    @storage_operation("Could not fetch home details.")
    async def get_home(self, email: str) -> Result[Home]:
        return await self._get_active_child(Home, email, "home")

    # ---------- 수정 ----------

    @storage_operation("Could not update participant.")
    async def replace(self, email: str, payload: NestedParticipantRequest) -> Result[ParticipantRecord]:
        """전체 수정 (work/home UPSERT로 soft delete 상태도 복구)"""
        participant = await self._find_participant(email)
        if not participant:
            return Err(ErrorKind.NOT_FOUND, PARTICIPANT_NOT_FOUND_MESSAGE)

        for name, value in payload.participant.model_dump(exclude={"email"}).items():
            setattr(participant, name, value)

        work_row, home_row = await self._write_children(email, payload.work, payload.home)
        await self._commit(participant, work_row, home_row)
        logger.info(f"Participant replaced: {email}")
        return Ok(ParticipantRecord(participant, work_row, home_row))

    @storage_operation("Could not update participant.")
    async def patch(self, email: str, fields: Dict[str, Any]) -> Result[Participant]:
        """전달된 필드만 변경"""
        participant = await self._find_participant(email)
        if not participant:
            return Err(ErrorKind.NOT_FOUND, PARTICIPANT_NOT_FOUND_MESSAGE)

        for name, value in fields.items():
            setattr(participant, name, value)

        await self._commit(participant)
        return Ok(participant)

    # ---------- 삭제 ----------

    @storage_operation("Could not delete participant.")
    async def delete(self, email: str) -> Result[str]:
        """work/home은 soft delete, participant 행은 삭제"""
        participant = await self._find_participant(email)
        if not participant:
            return Err(ErrorKind.NOT_FOUND, PARTICIPANT_NOT_FOUND_MESSAGE)

        for model in (Work, Home):
            record = await self._find_child(model, email)
            if record is not None:
                record.soft_delete()

        await self.db.delete(participant)
        await self.db.commit()
        logger.info(f"Participant deleted: {email}")
        return Ok(email)

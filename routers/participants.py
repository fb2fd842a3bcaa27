"""참가자 라우터 (이메일로 식별)"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from errors import ApiError, ErrorKind, unwrap
from schemas import (
    ParticipantCreateRequest,
    NestedParticipantRequest,
    ParticipantPatchRequest,
    ParticipantResponse,
    ParticipantSummary,
    PersonalDetails,
    WorkResponse,
    HomeResponse,
    ParticipantAggregate,
    ParticipantWriteResponse,
    ParticipantListResponse,
    ParticipantSummaryListResponse,
    DeleteResponse,
)
from middleware.basic_auth import BasicAuthRoute
from services.participant_service import ParticipantService, ParticipantRecord
from validation import parse_email_param

# 모든 참가자 엔드포인트는 본문 파싱 전에 Basic 인증
router = APIRouter(route_class=BasicAuthRoute)


def get_participant_service(db: AsyncSession = Depends(get_db)) -> ParticipantService:
    return ParticipantService(db)


EMAIL_MISMATCH_MESSAGE = "Path email must match the email in the request body."


def _aggregate(record: ParticipantRecord) -> dict:
    return {
        "participant": ParticipantResponse.model_validate(record.participant),
        "work": WorkResponse.model_validate(record.work) if record.work else None,
        "home": HomeResponse.model_validate(record.home) if record.home else None,
    }


# ============ 생성 ============

@router.post("", response_model=ParticipantWriteResponse, status_code=201)
async def create_participant(
    request: ParticipantCreateRequest,
    service: ParticipantService = Depends(get_participant_service)
):
    """참가자 단독 생성 (직장/거주지 없음)"""
    record = unwrap(await service.create(request))
    return ParticipantWriteResponse(message="Participant created", **_aggregate(record))


@router.post("/add", response_model=ParticipantWriteResponse, status_code=201)
async def add_participant(
    request: NestedParticipantRequest,
    service: ParticipantService = Depends(get_participant_service)
):
    """참가자 + 직장 + 거주지 생성"""
    record = unwrap(await service.create(request.participant, request.work, request.home))
    return ParticipantWriteResponse(message="Participant created", **_aggregate(record))


# ============ 조회 ============

@router.get("", response_model=ParticipantListResponse)
async def list_participants(
    service: ParticipantService = Depends(get_participant_service)
):
    """전체 참가자 목록 (최근 생성 순)"""
    participants = unwrap(await service.list_participants())
    return ParticipantListResponse(
        count=len(participants),
        participants=[ParticipantResponse.model_validate(p) for p in participants]
    )


@router.get("/details", response_model=ParticipantSummaryListResponse)
async def list_participant_details(
    service: ParticipantService = Depends(get_participant_service)
):
    """전체 참가자 이름/이메일 목록"""
    participants = unwrap(await service.list_participants())
    return ParticipantSummaryListResponse(
        count=len(participants),
        participants=[ParticipantSummary.model_validate(p) for p in participants]
    )


@router.get("/details/{email}", response_model=PersonalDetails)
async def get_personal_details(
    email: str,
    service: ParticipantService = Depends(get_participant_service)
):
    """개인 정보 조회"""
    email = unwrap(parse_email_param(email))
    participant = unwrap(await service.get(email))
    return PersonalDetails.model_validate(participant)


@router.get("/work/{email}", response_model=WorkResponse)
async def get_work(
    email: str,
    service: ParticipantService = Depends(get_participant_service)
):
    """직장 정보 조회 (soft delete된 정보는 404)"""
    email = unwrap(parse_email_param(email))
    work = unwrap(await service.get_work(email))
    return WorkResponse.model_validate(work)


@router.get("/home/{email}", response_model=HomeResponse)
async def get_home(
    email: str,
    service: ParticipantService = Depends(get_participant_service)
):
    """거주지 정보 조회 (soft delete된 정보는 404)"""
    email = unwrap(parse_email_param(email))
    home = unwrap(await service.get_home(email))
    return HomeResponse.model_validate(home)


@router.get("/{email}", response_model=ParticipantAggregate)
async def get_participant(
    email: str,
    service: ParticipantService = Depends(get_participant_service)
):
    """참가자 + 활성 직장/거주지 조회"""
    email = unwrap(parse_email_param(email))
    record = unwrap(await service.get_aggregate(email))
    return ParticipantAggregate(**_aggregate(record))


# ============ 수정 ============

@router.put("/{email}", response_model=ParticipantWriteResponse)
async def replace_participant(
    email: str,
    request: NestedParticipantRequest,
    service: ParticipantService = Depends(get_participant_service)
):
    """전체 수정 (participant.email은 경로와 같아야 함)"""
    email = unwrap(parse_email_param(email))
    if request.participant.email != email:
        raise ApiError(ErrorKind.BAD_REQUEST, EMAIL_MISMATCH_MESSAGE)

    record = unwrap(await service.replace(email, request))
    return ParticipantWriteResponse(message="Participant updated", **_aggregate(record))


@router.patch("/{email}", response_model=ParticipantWriteResponse)
async def patch_participant(
    email: str,
    request: ParticipantPatchRequest,
    service: ParticipantService = Depends(get_participant_service)
):
    """부분 수정 (이메일은 변경 불가)"""
    email = unwrap(parse_email_param(email))
    fields = request.model_dump(exclude_unset=True)
    if fields.pop("email", email) != email:
        raise ApiError(ErrorKind.BAD_REQUEST, EMAIL_MISMATCH_MESSAGE)

    participant = unwrap(await service.patch(email, fields))
    return ParticipantWriteResponse(
        message="Participant updated",
        participant=ParticipantResponse.model_validate(participant)
    )


# ============ 삭제 ============

@router.delete("/{email}", response_model=DeleteResponse)
async def delete_participant(
    email: str,
    service: ParticipantService = Depends(get_participant_service)
):
    """참가자 삭제 (직장/거주지는 soft delete)"""
    email = unwrap(parse_email_param(email))
    deleted = unwrap(await service.delete(email))
    return DeleteResponse(message="Participant deleted", email=deleted)

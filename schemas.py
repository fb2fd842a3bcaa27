"""요청/응답 스키마"""
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, model_validator

from validation import (
    check,
    validate_nested,
    validate_participant,
    validate_participant_patch,
)


# ============ 요청 ============

class ParticipantFields(BaseModel):
    """참가자 개인 정보"""
    email: str
    firstname: str
    lastname: str
    dob: date


class WorkFields(BaseModel):
    """직장 정보"""
    companyname: str
    salary: Decimal
    currency: str


class HomeFields(BaseModel):
    """거주지 정보"""
    country: str
    city: str


class ParticipantCreateRequest(ParticipantFields):
    """참가자 단독 생성 요청"""

    @model_validator(mode="before")
    @classmethod
    def normalize(cls, data):
        return check(validate_participant(data))


class NestedParticipantRequest(BaseModel):
    """참가자 + 직장 + 거주지 생성/전체 수정 요청"""
    participant: ParticipantFields
    work: WorkFields
    home: HomeFields

    @model_validator(mode="before")
    @classmethod
    def normalize(cls, data):
        return check(validate_nested(data))


class ParticipantPatchRequest(BaseModel):
    """부분 수정 요청 (전달된 필드만 반영)"""
    email: Optional[str] = None
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    dob: Optional[date] = None

    @model_validator(mode="before")
    @classmethod
    def normalize(cls, data):
        return check(validate_participant_patch(data))


# ============ 응답 ============

class ParticipantResponse(BaseModel):
    id: int
    email: str
    firstname: str
    lastname: str
    dob: date
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class ParticipantSummary(BaseModel):
    email: str
    firstname: str
    lastname: str

    class Config:
        from_attributes = True


class PersonalDetails(BaseModel):
    email: str
    firstname: str
    lastname: str
    dob: date

    class Config:
        from_attributes = True


class WorkResponse(BaseModel):
    companyname: str
    salary: float
    currency: str

    class Config:
        from_attributes = True


class HomeResponse(BaseModel):
    country: str
    city: str

    class Config:
        from_attributes = True


class ParticipantAggregate(BaseModel):
    """비활성(soft delete) 하위 정보는 null"""
    participant: ParticipantResponse
    work: Optional[WorkResponse] = None
    home: Optional[HomeResponse] = None


class ParticipantWriteResponse(ParticipantAggregate):
    message: str


class ParticipantListResponse(BaseModel):
    count: int
    participants: List[ParticipantResponse]


class ParticipantSummaryListResponse(BaseModel):
    count: int
    participants: List[ParticipantSummary]


class DeleteResponse(BaseModel):
    message: str
    email: str


class AdminIdentity(BaseModel):
    login: str
    id: int


class AdminTestResponse(BaseModel):
    message: str
    admin: AdminIdentity

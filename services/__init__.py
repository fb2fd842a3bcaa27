"""서비스 패키지"""
from services.admin_service import AdminService
from services.participant_service import ParticipantService

__all__ = ["AdminService", "ParticipantService"]

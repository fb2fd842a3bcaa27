"""SQLAlchemy 모델"""
from models.admin import Admin
from models.participant import Participant
from models.work import Work
from models.home import Home
from models.child_record import ChildState, child_state

__all__ = [
    "Admin",
    "Participant",
    "Work",
    "Home",
    "ChildState",
    "child_state",
]

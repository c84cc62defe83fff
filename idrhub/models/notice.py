"""Transient user-facing notification."""

from enum import Enum
from pydantic import BaseModel


class NoticeLevel(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    ERROR = "error"


class Notice(BaseModel):
    level: NoticeLevel
    message: str

"""
Notice Model
Toast payload returned alongside workflow results and errors
"""
from enum import Enum
from pydantic import BaseModel


class NoticeVariant(str, Enum):
    """How loudly the dashboard should show a notice"""
    DEFAULT = "default"
    ERROR = "error"


class Notice(BaseModel):
    """A toast the dashboard shows after an action"""
    title: str
    description: str
    variant: NoticeVariant = NoticeVariant.DEFAULT

    @classmethod
    def success(cls, description: str) -> "Notice":
        return cls(title="Success", description=description)

    @classmethod
    def error(cls, description: str, title: str = "Error") -> "Notice":
        return cls(title=title, description=description, variant=NoticeVariant.ERROR)

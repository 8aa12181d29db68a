from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError


class TextIn(BaseModel):
    text: str

    @field_validator('text')
    @classmethod
    def text_required(cls, v: str) -> str:
        if not v:
            raise PydanticCustomError('text_required', 'Text is required!')
        return v


class PostIn(TextIn):
    pass


class CommentIn(TextIn):
    pass


def _stringify_id(v: Any) -> Any:
    return str(v) if v is not None else v


class LikeOut(BaseModel):
    user: str


class CommentOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias='_id')
    text: str
    name: Optional[str] = None
    avatar: Optional[str] = None
    user: str
    date: datetime

    stringify_id = field_validator('id', mode='before')(_stringify_id)


class PostOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias='_id')
    text: str
    name: Optional[str] = None
    avatar: Optional[str] = None
    user: str
    likes: List[LikeOut] = []
    comments: List[CommentOut] = []
    date: datetime

    stringify_id = field_validator('id', mode='before')(_stringify_id)


class MessageOut(BaseModel):
    msg: str

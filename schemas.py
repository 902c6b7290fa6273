from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


# Host topics
class TopicCreate(BaseModel):
    cid: int
    title: str
    content: str
    is_question: Optional[bool] = None

class TopicEdit(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    is_question: Optional[bool] = None

class ReplyCreate(BaseModel):
    content: str

class TopicOut(BaseModel):
    tid: int
    cid: int
    uid: Optional[int] = None
    title: str
    main_pid: Optional[int] = None
    locked: int = 0
    is_question: Optional[int] = None
    is_solved: Optional[int] = None
    solved_pid: Optional[int] = None

    class Config:
        from_attributes = True

class PostOut(BaseModel):
    pid: int
    tid: int
    uid: Optional[int] = None
    content: str

    class Config:
        from_attributes = True


# Q&A
class QnaStatusOut(BaseModel):
    is_question: int = Field(serialization_alias="isQuestion")
    is_solved: int = Field(serialization_alias="isSolved")

class ToggleSolvedIn(BaseModel):
    tid: int
    pid: Optional[int] = None

class ToggleQuestionIn(BaseModel):
    tid: int

class SocketMessage(BaseModel):
    id: Optional[int] = None
    event: str
    data: Dict[str, Any] = Field(default_factory=dict)

class SocketReply(BaseModel):
    id: Optional[int] = None
    error: Optional[str] = None
    result: Any = None


# Admin
class QandASettingsUpdate(BaseModel):
    force_questions: bool = False
    toggle_lock: bool = False
    default_cids: List[int] = Field(default_factory=list)

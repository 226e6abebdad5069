from enum import Enum
from typing import Any
from pydantic import BaseModel


class QuestionType(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    MULTIPLE_CHOICE = "multipleChoice"
    CHECKBOXES = "checkboxes"


class QuestionAnswerInput(BaseModel):
    sectionId: str
    questionId: str
    value: Any = None


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str
    details: Any = None


ERROR_RESPONSES = {
    404: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}

RESPONSE_ERROR_RESPONSES = {
    **ERROR_RESPONSES,
    409: {"model": ErrorResponse},
}


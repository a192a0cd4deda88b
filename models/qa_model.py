"""
Pydantic models for API requests and responses
"""
from pydantic import BaseModel
from typing import Optional

class AskRequest(BaseModel):
    question: Optional[str] = None

class AskResponse(BaseModel):
    answer: str

class UploadResponse(BaseModel):
    message: str
    filePath: str  # server-side storage path
    status: str  # extraction status
    characters: Optional[int] = None
    error: Optional[str] = None

class StatusResponse(BaseModel):
    slot: str
    status: str
    characters: Optional[int] = None
    error: Optional[str] = None
    has_document: bool
    has_text: bool

class PDFInfoResponse(BaseModel):
    name: str
    size: int
    size_formatted: str

class MessageResponse(BaseModel):
    message: str

class HealthResponse(BaseModel):
    status: str
    has_document: bool
    has_text: bool
    characters: Optional[int] = None

class ErrorResponse(BaseModel):
    error: str

from pydantic import BaseModel
from typing import Optional


class ErrorResponse(BaseModel):
    """Standard error response"""
    success: bool = False
    code: str
    message: str
    field: Optional[str] = None

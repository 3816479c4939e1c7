from pydantic import BaseModel
from typing import Any, Dict, Optional

class ErrorBody(BaseModel):
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None

class ErrorResponse(BaseModel):
    """Envelope returned for every failed request."""
    error: ErrorBody

from pydantic import BaseModel
from typing import Generic, Optional, TypeVar

DataT = TypeVar("DataT")

class Envelope(BaseModel, Generic[DataT]):
    """Every response body: {success, data?, error?}."""
    success: bool = True
    data: Optional[DataT] = None
    error: Optional[str] = None

class MessageData(BaseModel):
    message: str

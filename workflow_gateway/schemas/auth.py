from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

class TokenClaims(BaseModel):
    model_config = ConfigDict(extra="allow")

    did: str = Field(min_length=1)
    username: Optional[str] = None

class Actor(BaseModel):
    """The authenticated identity performing an operation."""
    did: str
    username: Optional[str] = None

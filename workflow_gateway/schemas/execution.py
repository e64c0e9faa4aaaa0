from pydantic import BaseModel
from typing import Any, Dict, Optional

class WorkflowExecuteRequest(BaseModel):
    parameters: Optional[Dict[str, Any]] = None
    headers: Optional[Dict[str, Any]] = None

class ExecutionRequestInfo(BaseModel):
    method: str
    url: str
    headers: Dict[str, str]
    body: Dict[str, Any]

class ExecutionResponseInfo(BaseModel):
    status: int
    status_text: str
    headers: Dict[str, str]
    body: Any = None

class WorkflowExecuteResult(BaseModel):
    request: ExecutionRequestInfo
    response: ExecutionResponseInfo

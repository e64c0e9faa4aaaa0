from pydantic import BaseModel, ConfigDict, Field, StrictBool
from typing import Any, Dict, Optional
from datetime import datetime
from enum import Enum

class WorkflowSource(str, Enum):
    COZE = "coze"
    N8N = "n8n"

class TemplateName(str, Enum):
    WORKFLOW = "workflow"
    STREAMFLOW = "streamflow"

class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"

class WorkflowBase(BaseModel):
    workflow_name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    source: WorkflowSource
    template_name: TemplateName
    http_method: HttpMethod
    base_url: str = Field(min_length=1)
    bearer_token: str = Field(min_length=1)
    external_workflow_id: str = Field(min_length=1)
    parameters: Dict[str, Any] = {}
    headers: Dict[str, str] = {}

class WorkflowCreate(WorkflowBase):
    project_id: str = Field(min_length=1)

class WorkflowUpdate(BaseModel):
    """Sparse update; fields left out (or sent as null) keep their stored value."""
    workflow_name: Optional[str] = None
    description: Optional[str] = None
    source: Optional[WorkflowSource] = None
    template_name: Optional[TemplateName] = None
    http_method: Optional[HttpMethod] = None
    base_url: Optional[str] = None
    bearer_token: Optional[str] = None
    external_workflow_id: Optional[str] = None
    parameters: Optional[Dict[str, Any]] = None
    headers: Optional[Dict[str, str]] = None

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)

class WorkflowRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    workflow_id: str
    workflow_name: str
    description: str
    source: str
    template_name: str
    http_method: str
    base_url: str
    bearer_token: str
    external_workflow_id: str
    parameters: Optional[Dict[str, Any]] = None
    headers: Optional[Dict[str, Any]] = None
    project_id: str
    creator_did: str
    is_shared: bool
    created_at: datetime
    updated_at: datetime

class WorkflowCreated(BaseModel):
    workflow_id: str
    workflow_name: str

class WorkflowUpdated(BaseModel):
    workflow_id: str
    message: str = "Workflow updated successfully"

class ShareWorkflowRequest(BaseModel):
    # JSON true/false only; "yes", 1 and the like are rejected
    is_shared: StrictBool

class ShareWorkflowResult(BaseModel):
    workflow_id: str
    is_shared: bool

class HideWorkflowRequest(BaseModel):
    is_hidden: StrictBool

class HideWorkflowResult(BaseModel):
    project_id: str
    workflow_id: str
    is_hidden: bool

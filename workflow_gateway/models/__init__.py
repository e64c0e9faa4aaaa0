"""Database models."""

from workflow_gateway.models.membership import UserProject
from workflow_gateway.models.workflow import ProjectWorkflowSetting, Workflow

__all__ = [
    "ProjectWorkflowSetting",
    "UserProject",
    "Workflow",
]

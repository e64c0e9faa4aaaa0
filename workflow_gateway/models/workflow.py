from sqlalchemy import Boolean, CheckConstraint, ForeignKey, String, Text, JSON, DateTime, false
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func
from datetime import datetime
from typing import Any, Dict
from workflow_gateway.database import Base
import uuid

class Workflow(Base):
    __tablename__ = "workflows"
    __table_args__ = (
        CheckConstraint("source IN ('coze', 'n8n')", name="ck_workflows_source"),
        CheckConstraint("template_name IN ('workflow', 'streamflow')", name="ck_workflows_template_name"),
        CheckConstraint("http_method IN ('GET', 'POST', 'PUT')", name="ck_workflows_http_method"),
    )

    workflow_id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    workflow_name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    source: Mapped[str] = mapped_column(String, nullable=False)
    template_name: Mapped[str] = mapped_column(String, nullable=False)
    http_method: Mapped[str] = mapped_column(String, nullable=False)
    base_url: Mapped[str] = mapped_column(String, nullable=False)
    bearer_token: Mapped[str] = mapped_column(String, nullable=False)
    external_workflow_id: Mapped[str] = mapped_column(String, nullable=False)
    parameters: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    headers: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    project_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    creator_did: Mapped[str] = mapped_column(String, nullable=False)
    is_shared: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

class ProjectWorkflowSetting(Base):
    """Project-local hide override. No row means the workflow is not hidden."""
    __tablename__ = "project_workflow_settings"

    project_id: Mapped[str] = mapped_column(String, primary_key=True)
    workflow_id: Mapped[str] = mapped_column(
        String, ForeignKey("workflows.workflow_id", ondelete="CASCADE"), primary_key=True
    )
    is_hidden: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

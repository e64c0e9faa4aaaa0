from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from workflow_gateway.api.deps import json_body
from workflow_gateway.core.exceptions import NotFoundError
from workflow_gateway.core.logging import get_logger
from workflow_gateway.core.security import get_current_actor
from workflow_gateway.database import get_db
from workflow_gateway.schemas.auth import Actor
from workflow_gateway.schemas.common import Envelope, MessageData
from workflow_gateway.schemas.workflow import (
    HideWorkflowRequest,
    HideWorkflowResult,
    ShareWorkflowRequest,
    ShareWorkflowResult,
    WorkflowCreate,
    WorkflowCreated,
    WorkflowRead,
    WorkflowUpdate,
    WorkflowUpdated,
)
from workflow_gateway.services.access_policy import AccessPolicy
from workflow_gateway.services.visibility_service import VisibilityResolver
from workflow_gateway.services.workflow_service import WorkflowService
from typing import List

logger = get_logger("api.workflows")
router = APIRouter()

@router.post("/workflows", response_model=Envelope[WorkflowCreated])
async def create_workflow(
    actor: Actor = Depends(get_current_actor),
    workflow_in: WorkflowCreate = Depends(json_body(WorkflowCreate)),
    db: AsyncSession = Depends(get_db),
):
    await AccessPolicy(db).require_member(actor.did, workflow_in.project_id)

    workflow = await WorkflowService.create(db, workflow_in, creator_did=actor.did)
    logger.info(f"Workflow {workflow.workflow_id} created in project {workflow.project_id} by {actor.did}")
    return Envelope(data=WorkflowCreated(workflow_id=workflow.workflow_id, workflow_name=workflow.workflow_name))

@router.get("/projects/{project_id}/workflows", response_model=Envelope[List[WorkflowRead]])
async def list_workflows(
    project_id: str,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    await AccessPolicy(db).require_member(actor.did, project_id)

    workflows = await VisibilityResolver.list_visible(db, project_id)
    return Envelope(data=[WorkflowRead.model_validate(w) for w in workflows])

@router.put("/workflows/{workflow_id}", response_model=Envelope[WorkflowUpdated])
async def update_workflow(
    workflow_id: str,
    actor: Actor = Depends(get_current_actor),
    workflow_in: WorkflowUpdate = Depends(json_body(WorkflowUpdate)),
    db: AsyncSession = Depends(get_db),
):
    workflow = await WorkflowService.get_by_id(db, workflow_id)
    await AccessPolicy(db).require_admin_or_creator(actor.did, workflow, "update")

    await WorkflowService.update(db, workflow_id, workflow_in)
    return Envelope(data=WorkflowUpdated(workflow_id=workflow_id))

@router.delete("/workflows/{workflow_id}", response_model=Envelope[MessageData])
async def delete_workflow(
    workflow_id: str,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    workflow = await WorkflowService.get_by_id(db, workflow_id)
    await AccessPolicy(db).require_admin_or_creator(actor.did, workflow, "delete")

    if not await WorkflowService.delete(db, workflow_id):
        raise NotFoundError()
    logger.info(f"Workflow {workflow_id} deleted by {actor.did}")
    return Envelope(data=MessageData(message="Workflow deleted successfully"))

@router.put("/workflows/{workflow_id}/share", response_model=Envelope[ShareWorkflowResult])
async def share_workflow(
    workflow_id: str,
    actor: Actor = Depends(get_current_actor),
    share_in: ShareWorkflowRequest = Depends(json_body(ShareWorkflowRequest)),
    db: AsyncSession = Depends(get_db),
):
    workflow = await WorkflowService.get_by_id(db, workflow_id)
    await AccessPolicy(db).require_admin(
        actor.did, workflow.project_id, "Only project admin can share workflows"
    )

    await WorkflowService.set_shared(db, workflow_id, share_in.is_shared)
    return Envelope(data=ShareWorkflowResult(workflow_id=workflow_id, is_shared=share_in.is_shared))

@router.put("/projects/{project_id}/workflows/{workflow_id}/hide", response_model=Envelope[HideWorkflowResult])
async def hide_workflow(
    project_id: str,
    workflow_id: str,
    actor: Actor = Depends(get_current_actor),
    hide_in: HideWorkflowRequest = Depends(json_body(HideWorkflowRequest)),
    db: AsyncSession = Depends(get_db),
):
    await AccessPolicy(db).require_admin(actor.did, project_id, "Only project admin can hide workflows")
    if not await WorkflowService.exists(db, workflow_id):
        raise NotFoundError()

    await WorkflowService.set_hidden(db, project_id, workflow_id, hide_in.is_hidden)
    return Envelope(
        data=HideWorkflowResult(project_id=project_id, workflow_id=workflow_id, is_hidden=hide_in.is_hidden)
    )

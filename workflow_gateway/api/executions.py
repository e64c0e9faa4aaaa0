import httpx
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from workflow_gateway.api.deps import get_settings, json_body
from workflow_gateway.config import Settings
from workflow_gateway.core.exceptions import WorkflowExecutionError
from workflow_gateway.core.logging import get_logger, log_context
from workflow_gateway.core.security import get_current_actor
from workflow_gateway.database import get_session_factory
from workflow_gateway.engine.executor import WorkflowInvoker
from workflow_gateway.integrations.http_client import get_http_client
from workflow_gateway.schemas.auth import Actor
from workflow_gateway.schemas.common import Envelope
from workflow_gateway.schemas.execution import WorkflowExecuteRequest, WorkflowExecuteResult
from workflow_gateway.schemas.workflow import WorkflowRead
from workflow_gateway.services.access_policy import AccessPolicy
from workflow_gateway.services.workflow_service import WorkflowService

logger = get_logger("api.executions")
router = APIRouter()

@router.post("/workflows/{workflow_id}/execute", response_model=Envelope[WorkflowExecuteResult])
async def execute_workflow(
    workflow_id: str,
    actor: Actor = Depends(get_current_actor),
    request: WorkflowExecuteRequest = Depends(json_body(WorkflowExecuteRequest)),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
):
    # The session is closed before the outbound call so no connection is held while it runs
    async with session_factory() as db:
        workflow = await WorkflowService.get_by_id(db, workflow_id)
        await AccessPolicy(db).require_executable(actor.did, workflow)
        descriptor = WorkflowRead.model_validate(workflow)

    invoker = WorkflowInvoker(client, timeout=settings.WORKFLOW_EXECUTION_TIMEOUT)
    with log_context(workflow_id=workflow_id):
        try:
            result = await invoker.invoke(descriptor, request)
        except WorkflowExecutionError as e:
            logger.error(f"Error executing workflow {workflow_id}: {e}")
            raise e.__class__(f"Failed to execute workflow: {e}") from e

    return Envelope(data=result)

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession
from workflow_gateway.core.exceptions import ForbiddenError, store_errors
from workflow_gateway.core.logging import get_logger
from workflow_gateway.models import UserProject, Workflow

logger = get_logger("services.access_policy")

ADMIN_ROLE = "admin"

class AccessPolicy:
    """
    Membership-based authorization for one request.

    Lookup failures surface as InfrastructureError, denials as ForbiddenError.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def can_read(self, actor_did: str, project_id: str) -> bool:
        query = select(exists().where(
            UserProject.user_did == actor_did,
            UserProject.project_id == project_id,
        ))
        with store_errors("Failed to check project access"):
            result = await self.db.execute(query)
        return bool(result.scalar())

    async def can_administer(self, actor_did: str, project_id: str) -> bool:
        query = select(exists().where(
            UserProject.user_did == actor_did,
            UserProject.project_id == project_id,
            UserProject.role == ADMIN_ROLE,
        ))
        with store_errors("Failed to check permissions"):
            result = await self.db.execute(query)
        return bool(result.scalar())

    @staticmethod
    def is_creator(workflow: Workflow, actor_did: str) -> bool:
        return workflow.creator_did == actor_did

    async def require_member(self, actor_did: str, project_id: str) -> None:
        if not await self.can_read(actor_did, project_id):
            logger.warning(f"Access denied: {actor_did} is not a member of project {project_id}")
            raise ForbiddenError("Access denied to this project")

    async def require_admin(self, actor_did: str, project_id: str, message: str) -> None:
        if not await self.can_administer(actor_did, project_id):
            logger.warning(f"Admin required: {actor_did} is not admin of project {project_id}")
            raise ForbiddenError(message)

    async def require_admin_or_creator(self, actor_did: str, workflow: Workflow, action: str) -> None:
        is_admin = await self.can_administer(actor_did, workflow.project_id)
        if not is_admin and not self.is_creator(workflow, actor_did):
            logger.warning(f"Permission denied: {actor_did} cannot {action} workflow {workflow.workflow_id}")
            raise ForbiddenError(f"Only admin or creator can {action} this workflow")

    async def require_executable(self, actor_did: str, workflow: Workflow) -> None:
        has_access = await self.can_read(actor_did, workflow.project_id)
        if not has_access and not workflow.is_shared:
            logger.warning(f"Access denied: {actor_did} cannot execute workflow {workflow.workflow_id}")
            raise ForbiddenError("Access denied to this workflow")

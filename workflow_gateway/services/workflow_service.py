from sqlalchemy import exists, select, update, delete
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import func
from workflow_gateway.core.exceptions import NotFoundError, store_errors
from workflow_gateway.models import ProjectWorkflowSetting, Workflow
from workflow_gateway.schemas.workflow import WorkflowCreate, WorkflowUpdate
from typing import Any, Dict
import uuid

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}

class WorkflowService:
    @staticmethod
    async def get_by_id(db: AsyncSession, workflow_id: str) -> Workflow:
        query = select(Workflow).where(Workflow.workflow_id == workflow_id)
        with store_errors("Failed to get workflow"):
            result = await db.execute(query)
        workflow = result.scalar_one_or_none()
        if workflow is None:
            raise NotFoundError()
        return workflow

    @staticmethod
    async def exists(db: AsyncSession, workflow_id: str) -> bool:
        query = select(exists().where(Workflow.workflow_id == workflow_id))
        with store_errors("Failed to check workflow"):
            result = await db.execute(query)
        return bool(result.scalar())

    @staticmethod
    async def create(db: AsyncSession, workflow_in: WorkflowCreate, creator_did: str) -> Workflow:
        db_workflow = Workflow(
            workflow_id=str(uuid.uuid4()),
            creator_did=creator_did,
            is_shared=False,
            **workflow_in.model_dump(mode="json"),
        )
        with store_errors("Failed to create workflow"):
            db.add(db_workflow)
            await db.commit()
        return db_workflow

    @staticmethod
    async def update(db: AsyncSession, workflow_id: str, workflow_in: WorkflowUpdate) -> bool:
        """
        Apply only the supplied fields in a single UPDATE.

        Returns False without touching the row when nothing was supplied.
        """
        changes: Dict[str, Any] = workflow_in.changes()
        if not changes:
            return False

        query = (
            update(Workflow)
            .where(Workflow.workflow_id == workflow_id)
            .values(**changes, updated_at=func.now())
            .execution_options(synchronize_session=False)
        )
        with store_errors("Failed to update workflow"):
            await db.execute(query)
            await db.commit()
        return True

    @staticmethod
    async def delete(db: AsyncSession, workflow_id: str) -> bool:
        query = delete(Workflow).where(Workflow.workflow_id == workflow_id)
        with store_errors("Failed to delete workflow"):
            result = await db.execute(query)
            await db.commit()
        return result.rowcount > 0

    @staticmethod
    async def set_shared(db: AsyncSession, workflow_id: str, is_shared: bool) -> None:
        query = (
            update(Workflow)
            .where(Workflow.workflow_id == workflow_id)
            .values(is_shared=is_shared)
            .execution_options(synchronize_session=False)
        )
        with store_errors("Failed to update share status"):
            await db.execute(query)
            await db.commit()

    @staticmethod
    async def set_hidden(db: AsyncSession, project_id: str, workflow_id: str, is_hidden: bool) -> None:
        """Insert or update the (project, workflow) hide override in one statement."""
        with store_errors("Failed to update hide status"):
            dialect = db.get_bind().dialect.name
            insert = _UPSERT_DIALECTS[dialect]
            stmt = insert(ProjectWorkflowSetting).values(
                project_id=project_id,
                workflow_id=workflow_id,
                is_hidden=is_hidden,
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=[ProjectWorkflowSetting.project_id, ProjectWorkflowSetting.workflow_id],
                set_={"is_hidden": stmt.excluded.is_hidden, "updated_at": func.now()},
            )
            await db.execute(stmt)
            await db.commit()

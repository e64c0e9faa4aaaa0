from sqlalchemy import Select, and_, desc, false, or_, select, true
from sqlalchemy.ext.asyncio import AsyncSession
from workflow_gateway.core.exceptions import store_errors
from workflow_gateway.models import ProjectWorkflowSetting, Workflow
from typing import List

class VisibilityResolver:
    """
    Which workflows a project sees: its own plus every shared one,
    minus those the project has hidden, newest first.
    """

    @staticmethod
    def visible_query(project_id: str) -> Select:
        return (
            select(Workflow)
            .outerjoin(
                ProjectWorkflowSetting,
                and_(
                    ProjectWorkflowSetting.workflow_id == Workflow.workflow_id,
                    ProjectWorkflowSetting.project_id == project_id,
                ),
            )
            .where(or_(Workflow.project_id == project_id, Workflow.is_shared == true()))
            .where(or_(ProjectWorkflowSetting.is_hidden.is_(None), ProjectWorkflowSetting.is_hidden == false()))
            .order_by(desc(Workflow.created_at))
        )

    @staticmethod
    async def list_visible(db: AsyncSession, project_id: str) -> List[Workflow]:
        with store_errors("Failed to get workflows"):
            result = await db.execute(VisibilityResolver.visible_query(project_id))
        return list(result.scalars().all())

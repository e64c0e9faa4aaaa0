from sqlalchemy import CheckConstraint, String, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func
from datetime import datetime
from workflow_gateway.database import Base

class UserProject(Base):
    """Project membership. Maintained by the login service; only read here."""
    __tablename__ = "user_projects"
    __table_args__ = (
        CheckConstraint("role IN ('member', 'admin')", name="ck_user_projects_role"),
    )

    user_did: Mapped[str] = mapped_column(String, primary_key=True)
    project_id: Mapped[str] = mapped_column(String, primary_key=True)
    role: Mapped[str] = mapped_column(String, nullable=False, default="member")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

import pytest
from sqlalchemy.exc import OperationalError
from workflow_gateway.core.exceptions import ForbiddenError, InfrastructureError
from workflow_gateway.models import Workflow
from workflow_gateway.services.access_policy import AccessPolicy

def make_workflow(**overrides) -> Workflow:
    data = {"workflow_id": "w1", "project_id": "p1", "creator_did": "did:bob", "is_shared": False}
    data.update(overrides)
    return Workflow(**data)

@pytest.mark.asyncio
async def test_can_read_any_role(session_factory):
    async with session_factory() as db:
        policy = AccessPolicy(db)
        assert await policy.can_read("did:alice", "p1")
        assert await policy.can_read("did:bob", "p1")
        assert not await policy.can_read("did:carol", "p1")
        assert not await policy.can_read("did:nobody", "p1")

@pytest.mark.asyncio
async def test_can_administer_requires_admin_role(session_factory):
    async with session_factory() as db:
        policy = AccessPolicy(db)
        assert await policy.can_administer("did:alice", "p1")
        assert not await policy.can_administer("did:bob", "p1")
        assert not await policy.can_administer("did:dave", "p1")

def test_is_creator_is_structural():
    workflow = make_workflow()
    assert AccessPolicy.is_creator(workflow, "did:bob")
    assert not AccessPolicy.is_creator(workflow, "did:alice")

@pytest.mark.asyncio
async def test_admin_or_creator(session_factory):
    async with session_factory() as db:
        policy = AccessPolicy(db)
        workflow = make_workflow()
        await policy.require_admin_or_creator("did:bob", workflow, "update")
        await policy.require_admin_or_creator("did:alice", workflow, "update")
        with pytest.raises(ForbiddenError, match="Only admin or creator can delete"):
            await policy.require_admin_or_creator("did:dave", workflow, "delete")

@pytest.mark.asyncio
async def test_executable_when_member_or_shared(session_factory):
    async with session_factory() as db:
        policy = AccessPolicy(db)
        await policy.require_executable("did:bob", make_workflow())
        await policy.require_executable("did:carol", make_workflow(is_shared=True))
        with pytest.raises(ForbiddenError):
            await policy.require_executable("did:carol", make_workflow())

class BrokenSession:
    async def execute(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

@pytest.mark.asyncio
async def test_store_failure_is_not_a_denial():
    policy = AccessPolicy(BrokenSession())
    with pytest.raises(InfrastructureError) as exc_info:
        await policy.can_read("did:bob", "p1")
    assert exc_info.value.status_code == 500
    assert "connection refused" not in exc_info.value.message

import uuid

from app.models.membership import Membership
from app.models.workspace import Workspace
from app.rbac.errors import MembershipNotFound, WorkspaceNotFound
from app.store import Store

def resolve_membership(
    store: Store,
    actor_id: uuid.UUID,
    workspace_id: uuid.UUID,
) -> tuple[Workspace, Membership]:
    """Find the actor's membership in a workspace.

    Raises WorkspaceNotFound / MembershipNotFound; storage failures propagate
    as StorageUnavailable.
    """
    workspace = store.get_workspace(workspace_id)
    if workspace is None:
        raise WorkspaceNotFound(f"workspace {workspace_id} not found")

    membership = store.get_membership(actor_id, workspace_id)
    if membership is None:
        raise MembershipNotFound(f"user {actor_id} is not a member of workspace {workspace_id}")

    return workspace, membership

from typing import Optional

import kopf

from meshboard.configuration import configuration
from meshboard.resources.servicemesh import (
    SERVICE_MESH_CONTROL_PLANE,
    SERVICE_MESH_MEMBER_ROLL,
)
from meshboard.servicemesh.ownership import (
    OWNER_NAME_LABEL,
    OWNER_NAMESPACE_LABEL,
    OwnerRef,
    owner_request,
    request_reconcile,
)

OWNED_LABELS = {OWNER_NAME_LABEL: kopf.PRESENT, OWNER_NAMESPACE_LABEL: kopf.PRESENT}


def enqueue_owner(logger, body) -> Optional[OwnerRef]:
    """
    It requests the reconciliation of the tenant that owns a changed mesh object

    :param logger: a logger object
    :param body: The body of the changed mesh object
    :return: The tenant that is reconciled again, None if the object has no (existing) owner
    """
    metadata = body.get("metadata") or {}
    owner = owner_request(metadata.get("labels"))
    if owner is None:
        return None
    observed = f"{body.get('kind')}/{metadata.get('name')}@{metadata.get('resourceVersion')}"
    if request_reconcile(logger, configuration.tenant_resource, owner, observed):
        return owner
    return None


@kopf.on.event(
    SERVICE_MESH_CONTROL_PLANE.group,
    SERVICE_MESH_CONTROL_PLANE.version,
    SERVICE_MESH_CONTROL_PLANE.plural,
    labels=OWNED_LABELS,
)
def control_plane_changed(body, logger, **kwargs):
    enqueue_owner(logger, body)


@kopf.on.event(
    SERVICE_MESH_MEMBER_ROLL.group,
    SERVICE_MESH_MEMBER_ROLL.version,
    SERVICE_MESH_MEMBER_ROLL.plural,
    labels=OWNED_LABELS,
)
def member_roll_changed(body, logger, **kwargs):
    enqueue_owner(logger, body)

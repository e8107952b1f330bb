import copy
from typing import List, Optional, Tuple

import kubernetes as k8s

from meshboard.exceptions import MemberRollConflictError, MemberRollNotReadyError
from meshboard.resources.servicemesh import (
    SERVICE_MESH_MEMBER_ROLL,
    SMMR_NAME,
    create_member_roll_resource,
)
from meshboard.resources.utils import (
    create_custom_object,
    get_custom_object,
    is_not_found,
    replace_custom_object,
)
from meshboard.servicemesh.ownership import OwnerRef
from meshboard.utils import ingress_namespace

# the denial of the Maistra member roll admission webhook, see
# https://github.com/Maistra/istio-operator/blob/maistra-1.0/pkg/controller/servicemesh/validation/memberroll.go#L95
MEMBER_CONFLICT_MESSAGE = (
    "one or more members are already defined in another ServiceMeshMemberRoll"
)


def append_if_absent(members: List[str], namespace: str) -> Tuple[List[str], bool]:
    """
    It appends a namespace to the members unless it is already a member

    :param members: The current members
    :param namespace: The namespace to add
    :return: The members and whether they changed
    """
    if namespace in members:
        return members, False
    return [*members, namespace], True


def as_member_conflict(
    e: Exception, namespace: str
) -> Optional[MemberRollConflictError]:
    """
    It recognizes the rejection of a member roll write because the namespace is claimed by another member roll

    :param e: The error of a create or update request
    :param namespace: The tenant namespace that was to be added
    :return: The conflict error, None if this is any other error
    """
    if MEMBER_CONFLICT_MESSAGE in str(e):
        return MemberRollConflictError(namespace)
    return None


def install_member_roll(logger, owner: OwnerRef) -> None:
    """
    It adds the tenant namespace to the ServiceMeshMemberRoll in its ingress namespace and creates the member roll
    if it does not exist yet

    :param logger: a logger object
    :param owner: The tenant to add
    :raises MemberRollConflictError: if the tenant namespace is a member of another member roll
    """
    namespace = ingress_namespace(owner.namespace)
    try:
        smmr = get_custom_object(SERVICE_MESH_MEMBER_ROLL, SMMR_NAME, namespace)
    except k8s.client.exceptions.ApiException as e:
        if not is_not_found(e):
            raise e
        body = create_member_roll_resource(namespace, [owner.namespace], owner.labels)
        _write_member_roll(logger, owner, create_custom_object, body)
        logger.info(f"ServiceMeshMemberRoll {namespace}/{SMMR_NAME} created")
        return

    members = (smmr.get("spec") or {}).get("members") or []
    members, changed = append_if_absent(members, owner.namespace)
    if not changed:
        logger.debug(f"Namespace {owner.namespace} is already a member of {namespace}/{SMMR_NAME}")
        return
    body = copy.deepcopy(smmr)
    body.setdefault("spec", {})["members"] = members
    _write_member_roll(logger, owner, replace_custom_object, body)
    logger.info(f"ServiceMeshMemberRoll {namespace}/{SMMR_NAME} updated with {owner.namespace}")


def _write_member_roll(logger, owner: OwnerRef, write, body: dict) -> None:
    try:
        write(SERVICE_MESH_MEMBER_ROLL, body)
    except k8s.client.exceptions.ApiException as e:
        if conflict := as_member_conflict(e, owner.namespace):
            logger.info(
                f"Failed to update ServiceMeshMemberRoll because namespace {owner.namespace} is already a member "
                f"of another ServiceMeshMemberRoll"
            )
            raise conflict from e
        raise e


def check_member_roll_ready(logger, serving_namespace: str) -> None:
    """
    It checks once whether the mesh reports the tenant namespace as configured member; the desired members are not
    considered

    :param logger: a logger object
    :param serving_namespace: The namespace of the tenant
    :raises MemberRollNotReadyError: if the namespace is not a configured member yet
    """
    namespace = ingress_namespace(serving_namespace)
    smmr = get_custom_object(SERVICE_MESH_MEMBER_ROLL, SMMR_NAME, namespace)
    configured = (smmr.get("status") or {}).get("configuredMembers") or []
    if serving_namespace in configured:
        logger.debug(f"Namespace {serving_namespace} is a configured member of {namespace}/{SMMR_NAME}")
        return
    raise MemberRollNotReadyError(
        f"ServiceMeshMemberRoll {namespace}/{SMMR_NAME} not yet ready"
    )

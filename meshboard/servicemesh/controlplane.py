from meshboard.exceptions import ControlPlaneNotReadyError, ManifestError
from meshboard.resources.manifests import Manifest, inject_namespace, stamp_labels
from meshboard.resources.servicemesh import SERVICE_MESH_CONTROL_PLANE, SMCP_NAME
from meshboard.resources.utils import get_custom_object
from meshboard.servicemesh.ownership import OwnerRef
from meshboard.utils import ingress_namespace

READY_CONDITION = "Ready"
CONDITION_TRUE = "True"


def install_control_plane(logger, owner: OwnerRef, manifest_path: str) -> None:
    """
    It renders the ServiceMeshControlPlane manifest into the ingress namespace of the tenant, labels it with the
    owning tenant and applies it

    :param logger: a logger object
    :param owner: The tenant the control plane is installed for
    :param manifest_path: The path of the ServiceMeshControlPlane manifest
    """
    namespace = ingress_namespace(owner.namespace)
    try:
        manifest = Manifest.from_path(manifest_path)
    except ManifestError as e:
        logger.error(f"Unable to create ServiceMeshControlPlane manifest: {e}")
        raise e
    try:
        manifest = manifest.transform(
            inject_namespace(namespace), stamp_labels(owner.labels)
        )
    except ManifestError as e:
        logger.error(f"Unable to transform ServiceMeshControlPlane manifest: {e}")
        raise e
    try:
        manifest.apply(logger)
    except ManifestError as e:
        logger.error(f"Unable to install ServiceMeshControlPlane: {e}")
        raise e


def check_control_plane_ready(logger, serving_namespace: str) -> None:
    """
    It checks once whether the ServiceMeshControlPlane of a tenant reports the Ready condition

    :param logger: a logger object
    :param serving_namespace: The namespace of the tenant
    :raises ControlPlaneNotReadyError: if the Ready condition is missing or not True
    """
    namespace = ingress_namespace(serving_namespace)
    smcp = get_custom_object(SERVICE_MESH_CONTROL_PLANE, SMCP_NAME, namespace)
    conditions = (smcp.get("status") or {}).get("conditions") or []
    for condition in conditions:
        if (
            condition.get("type") == READY_CONDITION
            and condition.get("status") == CONDITION_TRUE
        ):
            logger.debug(f"ServiceMeshControlPlane {namespace}/{SMCP_NAME} is ready")
            return
    raise ControlPlaneNotReadyError(
        f"ServiceMeshControlPlane {namespace}/{SMCP_NAME} not yet ready"
    )

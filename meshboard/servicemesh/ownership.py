from dataclasses import dataclass
from typing import Mapping, Optional

import kubernetes as k8s

from meshboard.resources.utils import CustomResource, is_not_found, patch_custom_object

OWNER_NAME_LABEL = "serving.knative.openshift.io/ownerName"
OWNER_NAMESPACE_LABEL = "serving.knative.openshift.io/ownerNamespace"

# written to the tenant resource to have it reconciled again
MESH_OBSERVED_ANNOTATION = "meshboard.dev/mesh-observed"


@dataclass(frozen=True)
class OwnerRef:
    """
    The tenant resource a mesh object was created for
    """

    name: str
    namespace: str

    @property
    def labels(self) -> dict[str, str]:
        return {OWNER_NAME_LABEL: self.name, OWNER_NAMESPACE_LABEL: self.namespace}

    @classmethod
    def from_body(cls, body: Mapping) -> "OwnerRef":
        metadata = body["metadata"]
        return cls(name=metadata["name"], namespace=metadata["namespace"])


def owner_request(labels: Optional[Mapping[str, str]]) -> Optional[OwnerRef]:
    """
    It maps the labels of a changed mesh object to the tenant resource that has to be reconciled

    :param labels: The labels of the changed object
    :return: The owning tenant, or None if the object is not owned by a tenant
    """
    if not labels:
        return None
    name = labels.get(OWNER_NAME_LABEL)
    namespace = labels.get(OWNER_NAMESPACE_LABEL)
    if not name or not namespace:
        return None
    return OwnerRef(name=name, namespace=namespace)


def request_reconcile(
    logger, tenant_resource: CustomResource, owner: OwnerRef, observed: str
) -> bool:
    """
    It annotates the tenant resource with the observed mesh object, so that its update handler runs again

    :param logger: a logger object
    :param tenant_resource: The custom resource type of the tenant
    :param owner: The tenant to reconcile
    :param observed: A marker of the mesh object change (kind, name and resourceVersion)
    :return: False if the tenant does not exist (anymore)
    """
    try:
        patch_custom_object(
            tenant_resource,
            owner.name,
            owner.namespace,
            {"metadata": {"annotations": {MESH_OBSERVED_ANNOTATION: observed}}},
        )
    except k8s.client.exceptions.ApiException as e:
        if is_not_found(e):
            logger.info(
                f"{tenant_resource.kind} {owner.namespace}/{owner.name} does not exist, dropping mesh change {observed}"
            )
            return False
        raise e
    logger.debug(f"Requested reconciliation of {owner.namespace}/{owner.name} for {observed}")
    return True

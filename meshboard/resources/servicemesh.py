from typing import List

from meshboard.resources.utils import CustomResource

SERVICE_MESH_CONTROL_PLANE = CustomResource(
    group="maistra.io",
    version="v1",
    plural="servicemeshcontrolplanes",
    kind="ServiceMeshControlPlane",
)
SERVICE_MESH_MEMBER_ROLL = CustomResource(
    group="maistra.io",
    version="v1",
    plural="servicemeshmemberrolls",
    kind="ServiceMeshMemberRoll",
)
GATEWAY = CustomResource(
    group="networking.istio.io",
    version="v1alpha3",
    plural="gateways",
    kind="Gateway",
)

# the well-known names of the mesh singletons in an ingress namespace
SMCP_NAME = "basic-install"
SMMR_NAME = "default"


def create_member_roll_resource(
    namespace: str, members: List[str], labels: dict[str, str]
) -> dict:
    """
    Return a ServiceMeshMemberRoll K8s resource as dict.

    :param namespace: The ingress namespace that hosts the member roll
    :param members: The namespaces that should join the mesh
    :param labels: The labels of the member roll
    """
    return {
        "apiVersion": SERVICE_MESH_MEMBER_ROLL.api_version,
        "kind": SERVICE_MESH_MEMBER_ROLL.kind,
        "metadata": {
            "name": SMMR_NAME,
            "namespace": namespace,
            "labels": dict(labels),
        },
        "spec": {"members": list(members)},
    }

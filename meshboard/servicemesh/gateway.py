from meshboard.defaults import set_default_if_absent
from meshboard.resources.servicemesh import GATEWAY
from meshboard.utils import ingress_namespace

CONTROL_PLANE_SELECTOR = "maistra-control-plane"


def update_gateway(obj: dict) -> bool:
    """
    It binds a Gateway to the mesh control plane of its ingress namespace; other kinds are left alone

    :param obj: The object; it is changed in place
    :type obj: dict
    :return: True if the object is a Gateway
    """
    if obj.get("kind") != GATEWAY.kind:
        return False
    namespace = (obj.get("metadata") or {}).get("namespace", "")
    spec = obj.get("spec")
    if spec is None:
        spec = obj["spec"] = {}
    selector = spec.get("selector")
    if selector is None:
        selector = spec["selector"] = {}
    selector[CONTROL_PLANE_SELECTOR] = ingress_namespace(namespace)
    return True


def configure_gateways(resource: dict) -> bool:
    """
    It points the Knative gateways of a tenant resource to the gateways of its service mesh, unless configured otherwise

    :param resource: The body of the tenant resource; it is changed in place
    :return: True if the configuration was changed
    """
    namespace = ingress_namespace(resource["metadata"]["namespace"])
    c1 = set_default_if_absent(
        resource,
        "istio",
        "gateway.knative-ingress-gateway",
        f"istio-ingressgateway.{namespace}.svc.cluster.local",
    )
    c2 = set_default_if_absent(
        resource,
        "istio",
        "local-gateway.cluster-local-gateway",
        f"cluster-local-gateway.{namespace}.svc.cluster.local",
    )
    return c1 or c2

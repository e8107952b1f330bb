import copy

import kopf
import kubernetes as k8s

from meshboard.configuration import configuration
from meshboard.defaults import set_default_if_absent
from meshboard.resources.openshift import (
    CLUSTER_CONFIG_NAME,
    INGRESS_CONFIG,
    NETWORK_CONFIG,
    ROUTE,
)
from meshboard.resources.servicemesh import GATEWAY
from meshboard.resources.utils import (
    get_cluster_custom_object,
    get_custom_object,
    is_not_found,
)
from meshboard.servicemesh.gateway import configure_gateways, update_gateway

KIBANA_ROUTE_NAME = "kibana"
KIBANA_ROUTE_NAMESPACE = "openshift-logging"
LOG_URL_TEMPLATE = (
    "https://{host}/app/kibana#/discover?_a=(index:.all,query:"
    "'kubernetes.labels.serving_knative_dev%5C%2FrevisionUID:${{REVISION_UID}}')"
)


def configure_egress(resource: dict, logger) -> bool:
    try:
        network = get_cluster_custom_object(NETWORK_CONFIG, CLUSTER_CONFIG_NAME)
    except k8s.client.exceptions.ApiException as e:
        if not is_not_found(e):
            raise e
        logger.info("No OpenShift cluster network config available")
        return False
    service_network = ",".join((network.get("spec") or {}).get("serviceNetwork") or [])
    return set_default_if_absent(
        resource, "network", "istio.sidecar.includeOutboundIPRanges", service_network
    )


def configure_ingress(resource: dict, logger) -> bool:
    try:
        ingress = get_cluster_custom_object(INGRESS_CONFIG, CLUSTER_CONFIG_NAME)
    except k8s.client.exceptions.ApiException as e:
        if not is_not_found(e):
            raise e
        logger.info("No OpenShift ingress config available")
        return False
    if domain := (ingress.get("spec") or {}).get("domain"):
        return set_default_if_absent(resource, "domain", domain, "")
    return False


def configure_log_url_template(resource: dict, logger) -> bool:
    # the kibana route is only available if openshift-logging has been configured
    try:
        route = get_custom_object(ROUTE, KIBANA_ROUTE_NAME, KIBANA_ROUTE_NAMESPACE)
    except k8s.client.exceptions.ApiException:
        logger.info(
            f"No revision-url-template; no route for {KIBANA_ROUTE_NAMESPACE}/{KIBANA_ROUTE_NAME} found"
        )
        return False
    ingresses = (route.get("status") or {}).get("ingress") or []
    if ingresses and (host := ingresses[0].get("host")):
        return set_default_if_absent(
            resource,
            "observability",
            "logging.revision-url-template",
            LOG_URL_TEMPLATE.format(host=host),
        )
    return False


CONFIGURATORS = [
    configure_egress,
    configure_ingress,
    configure_log_url_template,
]


@kopf.on.mutate(
    configuration.TENANT_GROUP,
    configuration.TENANT_VERSION,
    configuration.TENANT_PLURAL,
    id="configure-defaults",
)  # type: ignore
def mutate_tenant_request(body, patch, logger, operation, **_):
    """
    It sets the defaults of the tenant configuration that are derived from the cluster and the service mesh, without
    overwriting values given by the user

    :param body: The body of the request
    :param patch: The patch that is returned to the API server
    :param logger: A logger object
    :param operation: The operation that is being performed on the resource
    """
    if operation not in ["CREATE", "UPDATE"]:
        return
    resource = copy.deepcopy(dict(body))
    changed = configure_gateways(resource)
    for configurator in CONFIGURATORS:
        changed = configurator(resource, logger) or changed
    if changed:
        logger.info("Setting configuration defaults for requested tenant")
        patch.spec["config"] = resource["spec"]["config"]


@kopf.on.mutate(GATEWAY.group, GATEWAY.version, GATEWAY.plural, id="bind-gateway")  # type: ignore
def mutate_gateway_request(body, patch, logger, operation, **_):
    """
    It binds Gateways to the service mesh control plane of their ingress namespace

    :param body: The body of the request
    :param patch: The patch that is returned to the API server
    :param logger: A logger object
    :param operation: The operation that is being performed on the resource
    """
    if operation not in ["CREATE", "UPDATE"]:
        return
    gateway = copy.deepcopy(dict(body))
    if update_gateway(gateway):
        logger.info(f"Binding Gateway {gateway['metadata'].get('name')} to its service mesh")
        patch.spec["selector"] = gateway["spec"]["selector"]

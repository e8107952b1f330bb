import kopf
import kubernetes as k8s
from packaging.version import InvalidVersion, Version

from meshboard.configuration import configuration
from meshboard.resources.openshift import CLUSTER_VERSION, CLUSTER_VERSION_NAME
from meshboard.resources.utils import get_cluster_custom_object


def parse_version(value: str) -> Version:
    # OpenShift reports semantic versions, pre-release and build suffixes are not compared
    return Version(value.strip().lstrip("vV").split("+")[0].split("-")[0])


def validate_version(name: str, namespace: str, logger):
    try:
        min_version = parse_version(configuration.MIN_OPENSHIFT_VERSION)
    except InvalidVersion:
        raise kopf.AdmissionError(
            "Unable to validate version; check MIN_OPENSHIFT_VERSION env var"
        )

    try:
        cluster_version = get_cluster_custom_object(CLUSTER_VERSION, CLUSTER_VERSION_NAME)
    except k8s.client.exceptions.ApiException as e:
        logger.warning(f"Unable to get ClusterVersion: {e.reason}")
        raise kopf.AdmissionError(f"Unable to get ClusterVersion: {e.reason}")

    desired = ((cluster_version.get("status") or {}).get("desired") or {}).get("version", "")
    try:
        current = parse_version(desired)
    except InvalidVersion:
        raise kopf.AdmissionError(f"Could not parse version string '{desired}'")

    if current.major == 0 and current.minor == 0:
        logger.info("CI build detected, bypassing version check")
        return

    if current < min_version:
        raise kopf.AdmissionError(
            f"Version constraint not fulfilled: minimum version: {min_version}, current version: {current}"
        )


def validate_namespace(name: str, namespace: str, logger):
    required = configuration.REQUIRED_NAMESPACE
    if required and required != namespace:
        logger.warning(f"{configuration.TENANT_KIND} '{name}' requested in namespace {namespace}")
        raise kopf.AdmissionError(
            f"{configuration.TENANT_KIND} may only be created in {required} namespace"
        )


VALIDATORS = [
    validate_version,
    validate_namespace,
]


@kopf.on.validate(
    configuration.TENANT_GROUP,
    configuration.TENANT_VERSION,
    configuration.TENANT_PLURAL,
    id="validate-tenant",
)  # type: ignore
def check_validate_tenant_request(body, logger, operation, **_):
    """
    If the operation is a CREATE, validate that the tenant can be onboarded in this cluster. If it cannot successfully
    validate, raise error.

    :param body: The body of the request
    :param logger: A logger object that can be used to log messages
    :param operation: The operation that is being performed on the resource
    :return: True
    """
    logger.info(f"Validating requested {configuration.TENANT_KIND}")

    if operation == "CREATE":
        metadata = body.get("metadata")
        name = metadata.get("name")
        namespace = metadata.get("namespace")
        for validator in VALIDATORS:
            validator(name, namespace, logger)
        return True
    else:
        return True

import copy

import kopf
import kubernetes as k8s

from meshboard.configuration import configuration
from meshboard.exceptions import MemberRollConflictError, NotReadyError
from meshboard.resources.utils import api_error_message
from meshboard.servicemesh import (
    OwnerRef,
    apply_service_mesh,
    remove_service_mesh,
)
from meshboard.servicemesh.gateway import configure_gateways
from meshboard.utils import ingress_namespace

TENANT = configuration.tenant_resource


def _write_status(patch, owner: OwnerRef, state: str, message: str = "") -> None:
    patch.status["serviceMesh"] = {
        "state": state,
        "ingressNamespace": ingress_namespace(owner.namespace),
        "message": message,
    }


@kopf.on.resume(TENANT.group, TENANT.version, TENANT.plural)
@kopf.on.create(TENANT.group, TENANT.version, TENANT.plural)
@kopf.on.update(TENANT.group, TENANT.version, TENANT.plural)
def tenant_service_mesh(body, patch, logger, **kwargs):
    """
    It onboards the namespace of the tenant into the service mesh; kopf invokes it again until the mesh is ready

    :param body: The body of the tenant resource
    :param patch: The patch that is applied to the tenant resource after this handler
    :param logger: the logger object
    """
    owner = OwnerRef.from_body(body)

    resource = copy.deepcopy(dict(body))
    if configure_gateways(resource):
        logger.info("Configured Knative gateways for the service mesh")
        patch.spec["config"] = resource["spec"]["config"]

    try:
        progress = apply_service_mesh(logger, owner, configuration.SMCP_MANIFEST)
    except NotReadyError as e:
        logger.info(str(e))
        _write_status(patch, owner, e.state, str(e))
        raise kopf.TemporaryError(str(e), delay=configuration.READY_DELAY)
    except MemberRollConflictError as e:
        _write_status(patch, owner, e.state, str(e))
        raise kopf.TemporaryError(str(e), delay=configuration.CONFLICT_DELAY)
    except k8s.client.exceptions.ApiException as e:
        _write_status(patch, owner, e.state, api_error_message(e))
        raise e
    except Exception as e:
        _write_status(patch, owner, e.state, str(e))
        raise e
    _write_status(patch, owner, progress.current_state.value)


@kopf.on.delete(TENANT.group, TENANT.version, TENANT.plural)
def tenant_service_mesh_removed(body, logger, **kwargs):
    """
    It removes the service mesh of the tenant

    :param body: the body of the tenant resource
    :param logger: a logger object
    """
    remove_service_mesh(logger, OwnerRef.from_body(body))

import json
from json import JSONDecodeError
from typing import NamedTuple, Optional

import kubernetes as k8s

core_v1_api = k8s.client.CoreV1Api()
custom_api = k8s.client.CustomObjectsApi()


class CustomResource(NamedTuple):
    group: str
    version: str
    plural: str
    kind: str

    @property
    def api_version(self) -> str:
        return f"{self.group}/{self.version}"


def is_not_found(e: k8s.client.exceptions.ApiException) -> bool:
    return e.status == 404


def is_already_exists(e: k8s.client.exceptions.ApiException) -> bool:
    # only meaningful for create requests, an update answers 409 for a stale resourceVersion
    return e.status == 409


def api_error_message(e: k8s.client.exceptions.ApiException) -> str:
    """
    It returns the message the API server sent along with a failed request

    :param e: the exception raised by the Kubernetes client
    :return: the message of the Status object in the response body, or the string representation of the exception
    """
    try:
        body = json.loads(e.body)
    except (TypeError, JSONDecodeError):
        return str(e)
    if isinstance(body, dict) and body.get("message"):
        return body["message"]
    return str(e)


def read_namespace(name: str) -> k8s.client.V1Namespace:
    return core_v1_api.read_namespace(name=name)


def handle_create_namespace(logger, namespace: str) -> str:
    """
    It creates a namespace in Kubernetes

    :param logger: a logger object
    :param namespace: The namespace to create
    :type namespace: str
    :return: The namespace that was created.
    """
    try:
        core_v1_api.create_namespace(
            body=k8s.client.V1Namespace(
                metadata=k8s.client.V1ObjectMeta(name=namespace)
            )
        )
        logger.info(f"Created namespace {namespace}")
    except k8s.client.exceptions.ApiException as e:
        if is_already_exists(e):
            logger.warning(f"Namespace {namespace} already exists")
        else:
            raise e
    return namespace


def handle_delete_namespace(logger, namespace: str) -> Optional[k8s.client.V1Status]:
    """
    It deletes a namespace; a namespace that is already gone is not an error

    :param logger: a logger object
    :param namespace: The namespace to delete
    :return: The status of the delete operation.
    """
    try:
        status = core_v1_api.delete_namespace(name=namespace)
        logger.info(f"Deleted namespace {namespace}")
        return status
    except k8s.client.exceptions.ApiException as e:
        if is_not_found(e):
            logger.info(f"Namespace {namespace} already deleted")
            return None
        raise e


def get_custom_object(resource: CustomResource, name: str, namespace: str) -> dict:
    return custom_api.get_namespaced_custom_object(
        group=resource.group,
        version=resource.version,
        namespace=namespace,
        plural=resource.plural,
        name=name,
    )


def get_cluster_custom_object(resource: CustomResource, name: str) -> dict:
    return custom_api.get_cluster_custom_object(
        group=resource.group,
        version=resource.version,
        plural=resource.plural,
        name=name,
    )


def create_custom_object(resource: CustomResource, body: dict) -> dict:
    return custom_api.create_namespaced_custom_object(
        group=resource.group,
        version=resource.version,
        namespace=body["metadata"]["namespace"],
        plural=resource.plural,
        body=body,
    )


def replace_custom_object(resource: CustomResource, body: dict) -> dict:
    """
    It replaces a custom object; the API server rejects the request if the resourceVersion in body is stale

    :param resource: The custom resource type
    :param body: The full object including metadata.resourceVersion
    :return: The updated object
    """
    return custom_api.replace_namespaced_custom_object(
        group=resource.group,
        version=resource.version,
        namespace=body["metadata"]["namespace"],
        plural=resource.plural,
        name=body["metadata"]["name"],
        body=body,
    )


def patch_custom_object(
    resource: CustomResource, name: str, namespace: str, body: dict
) -> dict:
    return custom_api.patch_namespaced_custom_object(
        group=resource.group,
        version=resource.version,
        namespace=namespace,
        plural=resource.plural,
        name=name,
        body=body,
    )

from typing import Optional

import kubernetes as k8s

from meshboard.resources.utils import (
    handle_create_namespace,
    handle_delete_namespace,
    is_not_found,
    read_namespace,
)
from meshboard.utils import ingress_namespace


def ensure_ingress_namespace(logger, serving_namespace: str) -> str:
    """
    It creates the ingress namespace of a tenant namespace unless it already exists

    :param logger: a logger object
    :param serving_namespace: The namespace of the tenant
    :type serving_namespace: str
    :return: The ingress namespace
    """
    namespace = ingress_namespace(serving_namespace)
    try:
        read_namespace(namespace)
    except k8s.client.exceptions.ApiException as e:
        if not is_not_found(e):
            raise e
        handle_create_namespace(logger, namespace)
    else:
        logger.debug(f"Namespace {namespace} exists")
    return namespace


def delete_ingress_namespace(logger, serving_namespace: str) -> Optional[str]:
    """
    It deletes the ingress namespace of a tenant namespace

    :param logger: a logger object
    :param serving_namespace: The namespace of the tenant
    :type serving_namespace: str
    :return: The deleted namespace, None if there was nothing to delete
    """
    namespace = ingress_namespace(serving_namespace)
    try:
        read_namespace(namespace)
    except k8s.client.exceptions.ApiException as e:
        if is_not_found(e):
            # there is nothing to do for us
            return None
        raise e
    handle_delete_namespace(logger, namespace)
    return namespace

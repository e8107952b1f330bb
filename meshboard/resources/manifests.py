import copy
from typing import Callable, List, Optional

import kubernetes as k8s
import yaml

from meshboard.exceptions import (
    ManifestApplyError,
    ManifestRenderError,
    ManifestTransformError,
)
from meshboard.resources.servicemesh import SERVICE_MESH_CONTROL_PLANE
from meshboard.resources.utils import (
    CustomResource,
    api_error_message,
    create_custom_object,
    get_custom_object,
    is_already_exists,
    is_not_found,
    patch_custom_object,
)

Transformer = Callable[[dict], None]

KNOWN_RESOURCES = {
    (SERVICE_MESH_CONTROL_PLANE.api_version, SERVICE_MESH_CONTROL_PLANE.kind): SERVICE_MESH_CONTROL_PLANE,
}


def inject_namespace(namespace: str) -> Transformer:
    def _inject(resource: dict) -> None:
        resource.setdefault("metadata", {})["namespace"] = namespace

    return _inject


def stamp_labels(labels: dict[str, str]) -> Transformer:
    def _stamp(resource: dict) -> None:
        metadata = resource.setdefault("metadata", {})
        metadata["labels"] = {**(metadata.get("labels") or {}), **labels}

    return _stamp


def resource_for(body: dict) -> CustomResource:
    """
    It maps the apiVersion and kind of an object to the custom resource it is served as

    :param body: The object
    :type body: dict
    :return: The custom resource type of this object
    """
    api_version = body.get("apiVersion", "")
    kind = body.get("kind", "")
    if known := KNOWN_RESOURCES.get((api_version, kind)):
        return known
    if "/" not in api_version or not kind:
        raise ManifestApplyError(
            f"Cannot apply object of kind '{kind}' with apiVersion '{api_version}': only custom objects are supported"
        )
    group, version = api_version.split("/", 1)
    return CustomResource(
        group=group, version=version, plural=f"{kind.lower()}s", kind=kind
    )


class Manifest:
    """
    A set of namespaced objects read from a YAML file that can be transformed and applied
    """

    def __init__(self, resources: List[dict], path: Optional[str] = None):
        self.resources = resources
        self.path = path

    @classmethod
    def from_path(cls, path: str) -> "Manifest":
        try:
            with open(path) as f:
                documents = list(yaml.safe_load_all(f))
        except (OSError, yaml.YAMLError) as e:
            raise ManifestRenderError(
                f"Unable to create manifest from {path}: {e}"
            ) from e
        resources = [document for document in documents if document]
        for resource in resources:
            if not isinstance(resource, dict):
                raise ManifestRenderError(
                    f"Unable to create manifest from {path}: document is not an object"
                )
            if not (resource.get("metadata") or {}).get("name"):
                raise ManifestRenderError(
                    f"Unable to create manifest from {path}: {resource.get('kind')} without metadata.name"
                )
        return cls(resources, path)

    def transform(self, *transformers: Transformer) -> "Manifest":
        """
        It returns a new manifest with all transformers applied to a copy of every object

        :param transformers: functions that mutate an object in place
        :return: The transformed manifest
        """
        resources = copy.deepcopy(self.resources)
        for resource in resources:
            for transformer in transformers:
                try:
                    transformer(resource)
                except Exception as e:  # noqa
                    raise ManifestTransformError(
                        f"Unable to transform manifest {self.path}: {e}"
                    ) from e
        return Manifest(resources, self.path)

    def apply(self, logger) -> None:
        for resource in self.resources:
            self._apply_resource(logger, resource)

    def _apply_resource(self, logger, body: dict) -> None:
        crd = resource_for(body)
        metadata = body.get("metadata") or {}
        name = metadata.get("name")
        namespace = metadata.get("namespace")
        if not name or not namespace:
            raise ManifestApplyError(
                f"Unable to apply {crd.kind} '{name}': metadata.name and metadata.namespace are required"
            )
        try:
            try:
                get_custom_object(crd, name, namespace)
            except k8s.client.exceptions.ApiException as e:
                if not is_not_found(e):
                    raise e
                try:
                    create_custom_object(crd, body)
                    logger.info(f"{crd.kind} {name} created in namespace {namespace}")
                    return
                except k8s.client.exceptions.ApiException as e:
                    if not is_already_exists(e):
                        raise e
            patch_custom_object(crd, name, namespace, body)
            logger.info(f"{crd.kind} {name} patched in namespace {namespace}")
        except k8s.client.exceptions.ApiException as e:
            raise ManifestApplyError(
                f"Unable to apply {crd.kind} {name} in namespace {namespace}: {api_error_message(e)}"
            ) from e

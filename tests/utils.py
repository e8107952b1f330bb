import copy
import itertools
import json
from typing import Callable, List, Optional

import kubernetes as k8s

from meshboard.resources.servicemesh import (
    SERVICE_MESH_CONTROL_PLANE,
    SERVICE_MESH_MEMBER_ROLL,
    SMCP_NAME,
    SMMR_NAME,
)

MAISTRA_MEMBER_CONFLICT = (
    'admission webhook "smmr.validation.maistra.io" denied the request: '
    "one or more members are already defined in another ServiceMeshMemberRoll"
)


def api_exception(status: int, reason: str, message: Optional[str] = None):
    e = k8s.client.exceptions.ApiException(status=status, reason=reason)
    e.body = json.dumps(
        {
            "kind": "Status",
            "apiVersion": "v1",
            "status": "Failure",
            "message": message or reason,
            "reason": reason,
            "code": status,
        }
    )
    return e


def _merge(source: dict, patch: dict) -> dict:
    for key, value in patch.items():
        if value is None:
            source.pop(key, None)
        elif isinstance(value, dict) and isinstance(source.get(key), dict):
            _merge(source[key], value)
        else:
            source[key] = copy.deepcopy(value)
    return source


class FakeCoreV1Api:
    """
    Keeps namespaces in memory and answers like the Kubernetes API server
    """

    def __init__(self):
        self.namespaces: dict[str, k8s.client.V1Namespace] = {}
        self.calls: List[tuple] = []
        self.failures: dict[str, k8s.client.exceptions.ApiException] = {}

    def _fail(self, verb: str):
        if failure := self.failures.get(verb):
            raise failure

    def read_namespace(self, name, **kwargs):
        self.calls.append(("read", name))
        self._fail("read")
        if name not in self.namespaces:
            raise api_exception(404, "NotFound", f'namespaces "{name}" not found')
        return self.namespaces[name]

    def create_namespace(self, body, **kwargs):
        name = body.metadata.name
        self.calls.append(("create", name))
        self._fail("create")
        if name in self.namespaces:
            raise api_exception(409, "AlreadyExists", f'namespaces "{name}" already exists')
        self.namespaces[name] = body
        return body

    def delete_namespace(self, name, **kwargs):
        self.calls.append(("delete", name))
        self._fail("delete")
        if name not in self.namespaces:
            raise api_exception(404, "NotFound", f'namespaces "{name}" not found')
        del self.namespaces[name]
        return k8s.client.V1Status(status="Success")

    def count(self, verb: str) -> int:
        return len([call for call in self.calls if call[0] == verb])


class FakeCustomObjectsApi:
    """
    Keeps custom objects in memory and answers like the Kubernetes API server, including resourceVersion checks
    and admission webhooks
    """

    def __init__(self):
        self.objects: dict[tuple, dict] = {}
        self.calls: List[tuple] = []
        self.admission: List[Callable[[str, dict], Optional[str]]] = []
        self.failures: dict[tuple, k8s.client.exceptions.ApiException] = {}
        self._versions = itertools.count(1)

    def _record(self, verb, plural, namespace, name):
        self.calls.append((verb, plural, namespace, name))
        if failure := self.failures.get((verb, plural)):
            raise failure

    def _admit(self, plural, body):
        for webhook in self.admission:
            if message := webhook(plural, body):
                raise api_exception(403, "Forbidden", message)

    def _stored(self, plural, namespace, name) -> dict:
        try:
            return self.objects[(plural, namespace, name)]
        except KeyError:
            raise api_exception(404, "NotFound", f'{plural} "{name}" not found')

    def _bump(self, body: dict) -> None:
        body.setdefault("metadata", {})["resourceVersion"] = str(next(self._versions))

    def get_namespaced_custom_object(self, group, version, namespace, plural, name, **kwargs):
        self._record("get", plural, namespace, name)
        return copy.deepcopy(self._stored(plural, namespace, name))

    def get_cluster_custom_object(self, group, version, plural, name, **kwargs):
        self._record("get", plural, None, name)
        return copy.deepcopy(self._stored(plural, None, name))

    def create_namespaced_custom_object(self, group, version, namespace, plural, body, **kwargs):
        name = body["metadata"]["name"]
        self._record("create", plural, namespace, name)
        if (plural, namespace, name) in self.objects:
            raise api_exception(409, "AlreadyExists", f'{plural} "{name}" already exists')
        self._admit(plural, body)
        stored = copy.deepcopy(body)
        stored["metadata"]["namespace"] = namespace
        self._bump(stored)
        self.objects[(plural, namespace, name)] = stored
        return copy.deepcopy(stored)

    def replace_namespaced_custom_object(self, group, version, namespace, plural, name, body, **kwargs):
        self._record("replace", plural, namespace, name)
        stored = self._stored(plural, namespace, name)
        if body["metadata"].get("resourceVersion") != stored["metadata"]["resourceVersion"]:
            raise api_exception(
                409,
                "Conflict",
                f'Operation cannot be fulfilled on {plural} "{name}": the object has been modified',
            )
        self._admit(plural, body)
        replaced = copy.deepcopy(body)
        # the status is not part of an update of the main resource
        if "status" in stored:
            replaced["status"] = copy.deepcopy(stored["status"])
        self._bump(replaced)
        self.objects[(plural, namespace, name)] = replaced
        return copy.deepcopy(replaced)

    def patch_namespaced_custom_object(self, group, version, namespace, plural, name, body, **kwargs):
        self._record("patch", plural, namespace, name)
        stored = self._stored(plural, namespace, name)
        _merge(stored, body)
        self._bump(stored)
        return copy.deepcopy(stored)

    def put(self, plural: str, namespace: Optional[str], body: dict) -> dict:
        """
        Stores an object the way another controller would have created it
        """
        stored = copy.deepcopy(body)
        stored.setdefault("metadata", {})
        if namespace is not None:
            stored["metadata"]["namespace"] = namespace
        self._bump(stored)
        self.objects[(plural, namespace, stored["metadata"]["name"])] = stored
        return stored

    def get(self, plural: str, namespace: Optional[str], name: str) -> Optional[dict]:
        return self.objects.get((plural, namespace, name))

    def count(self, verb: str, plural: Optional[str] = None) -> int:
        return len(
            [
                call
                for call in self.calls
                if call[0] == verb and (plural is None or call[1] == plural)
            ]
        )


class FakeCluster:
    def __init__(self):
        self.core_v1_api = FakeCoreV1Api()
        self.custom_api = FakeCustomObjectsApi()

    def add_namespace(self, name: str) -> None:
        self.core_v1_api.namespaces[name] = k8s.client.V1Namespace(
            metadata=k8s.client.V1ObjectMeta(name=name)
        )

    def control_plane(self, namespace: str) -> Optional[dict]:
        return self.custom_api.get(SERVICE_MESH_CONTROL_PLANE.plural, namespace, SMCP_NAME)

    def member_roll(self, namespace: str) -> Optional[dict]:
        return self.custom_api.get(SERVICE_MESH_MEMBER_ROLL.plural, namespace, SMMR_NAME)

    def set_control_plane_conditions(self, namespace: str, conditions: List[dict]) -> None:
        # what the mesh operator reports on the control plane
        self.control_plane(namespace)["status"] = {"conditions": conditions}

    def set_configured_members(self, namespace: str, members: List[str]) -> None:
        # what the mesh operator reports on the member roll
        self.member_roll(namespace)["status"] = {"configuredMembers": members}

    def claim_members_elsewhere(self, *namespaces: str) -> None:
        """
        Emulates the Maistra member roll webhook for namespaces that are members of another member roll
        """

        def _webhook(plural: str, body: dict) -> Optional[str]:
            if plural != SERVICE_MESH_MEMBER_ROLL.plural:
                return None
            members = (body.get("spec") or {}).get("members") or []
            if any(member in namespaces for member in members):
                return MAISTRA_MEMBER_CONFLICT
            return None

        self.custom_api.admission.append(_webhook)


def tenant_body(name: str = "knative-serving", namespace: str = "knative-serving", config: dict = None) -> dict:
    body = {
        "apiVersion": "operator.knative.dev/v1alpha1",
        "kind": "KnativeServing",
        "metadata": {"name": name, "namespace": namespace, "uid": f"{namespace}-{name}-uid"},
        "spec": {},
    }
    if config is not None:
        body["spec"]["config"] = config
    return body


READY = [{"type": "Ready", "status": "True", "reason": "InstallSuccessful"}]

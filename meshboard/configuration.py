import logging

from decouple import config

from meshboard.resources.utils import CustomResource

__VERSION__ = "0.1.0"

logger = logging.getLogger("meshboard")


class MeshboardConfiguration:
    def __init__(self):
        self.NAMESPACE = config("MESHBOARD_NAMESPACE", default="meshboard")

        #
        # the tenant resource that is onboarded into the service mesh
        #
        self.TENANT_GROUP = config(
            "MESHBOARD_TENANT_GROUP", default="operator.knative.dev"
        )
        self.TENANT_VERSION = config("MESHBOARD_TENANT_VERSION", default="v1alpha1")
        self.TENANT_PLURAL = config("MESHBOARD_TENANT_PLURAL", default="knativeservings")
        self.TENANT_KIND = config("MESHBOARD_TENANT_KIND", default="KnativeServing")

        #
        # service mesh settings
        #
        self.SMCP_MANIFEST = config(
            "MESHBOARD_SMCP_MANIFEST", default="deploy/resources/servicemesh/smcp.yaml"
        )
        # seconds until kopf re-invokes the onboarding while the mesh is not ready
        self.READY_DELAY = config("MESHBOARD_READY_DELAY", default=10, cast=int)
        # seconds until kopf re-invokes the onboarding after a member roll conflict
        self.CONFLICT_DELAY = config("MESHBOARD_CONFLICT_DELAY", default=60, cast=int)

        #
        # admission webhooks
        #
        self.WEBHOOK_HOST = config(
            "MESHBOARD_WEBHOOK_HOST", default="meshboard-admission.meshboard.svc"
        )
        self.WEBHOOK_PORT = config("MESHBOARD_WEBHOOK_PORT", default=9443, cast=int)
        self.WEBHOOK_CERTFILE = config(
            "MESHBOARD_WEBHOOK_CERTFILE", default="client-cert.pem"
        )
        self.WEBHOOK_PKEYFILE = config(
            "MESHBOARD_WEBHOOK_PKEYFILE", default="client-key.pem"
        )

        #
        # validation of tenant requests
        #
        self.MIN_OPENSHIFT_VERSION = config("MIN_OPENSHIFT_VERSION", default="")
        self.REQUIRED_NAMESPACE = config("REQUIRED_NAMESPACE", default=None)

    @property
    def tenant_resource(self) -> CustomResource:
        return CustomResource(
            group=self.TENANT_GROUP,
            version=self.TENANT_VERSION,
            plural=self.TENANT_PLURAL,
            kind=self.TENANT_KIND,
        )

    def to_dict(self):
        return {k: v for k, v in self.__dict__.items() if k.isupper()}

    def __str__(self):
        return str(self.to_dict())


configuration = MeshboardConfiguration()

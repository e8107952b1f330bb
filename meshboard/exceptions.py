class MeshboardError(Exception):
    pass


class NotReadyError(MeshboardError):
    """
    A mesh object exists but does not report the awaited state yet; the onboarding has to be re-invoked later
    """


class ControlPlaneNotReadyError(NotReadyError):
    pass


class MemberRollNotReadyError(NotReadyError):
    pass


class MemberRollConflictError(MeshboardError):
    """
    The tenant namespace is already a member of another ServiceMeshMemberRoll
    """

    MESSAGE = (
        "Could not add '{namespace}' to ServiceMeshMemberRoll (SMMR) because it's already part of another SMMR, "
        "likely one in 'istio-system' (check with 'oc get smmr --all-namespaces'). "
        "Remove '{namespace}' and all namespaces that contain Knative Services from that other SMMR"
    )

    def __init__(self, namespace: str):
        self.namespace = namespace
        super().__init__(self.MESSAGE.format(namespace=namespace))


class ManifestError(MeshboardError):
    pass


class ManifestRenderError(ManifestError):
    pass


class ManifestTransformError(ManifestError):
    pass


class ManifestApplyError(ManifestError):
    pass

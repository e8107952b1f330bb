from meshboard.resources.utils import CustomResource

# cluster scoped configuration of an OpenShift cluster
NETWORK_CONFIG = CustomResource(
    group="config.openshift.io", version="v1", plural="networks", kind="Network"
)
INGRESS_CONFIG = CustomResource(
    group="config.openshift.io", version="v1", plural="ingresses", kind="Ingress"
)
CLUSTER_VERSION = CustomResource(
    group="config.openshift.io",
    version="v1",
    plural="clusterversions",
    kind="ClusterVersion",
)

ROUTE = CustomResource(
    group="route.openshift.io", version="v1", plural="routes", kind="Route"
)

CLUSTER_CONFIG_NAME = "cluster"
CLUSTER_VERSION_NAME = "version"

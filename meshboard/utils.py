INGRESS_NAMESPACE_SUFFIX = "-ingress"


def ingress_namespace(serving_namespace: str) -> str:
    """
    It returns the name of the namespace that hosts the mesh ingress for a tenant namespace

    :param serving_namespace: The namespace of the tenant
    :type serving_namespace: str
    :return: The ingress namespace name.
    """
    return f"{serving_namespace}{INGRESS_NAMESPACE_SUFFIX}"

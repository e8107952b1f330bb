import logging

logger = logging.getLogger("meshboard")


def set_default_if_absent(resource: dict, domain: str, key: str, value: str) -> bool:
    """
    It sets spec.config[domain][key] of a tenant resource, but only if it is not set yet, so that values given by the
    user are never overwritten

    :param resource: The body of the tenant resource; it is changed in place
    :type resource: dict
    :param domain: The configuration domain (the name of the config map)
    :type domain: str
    :param key: The key within the domain
    :type key: str
    :param value: The default value
    :type value: str
    :return: True if the resource was changed
    """
    spec = resource.get("spec")
    if spec is None:
        spec = resource["spec"] = {}
    config = spec.get("config")
    if config is None:
        config = spec["config"] = {}
    domain_config = config.get(domain)
    if domain_config is None:
        domain_config = config[domain] = {}

    current = domain_config.get(key)
    if current:
        return False
    if key in domain_config and current == value:
        return False
    domain_config[key] = value
    logger.debug(f"Configured {domain}: {key}={value}")
    return True

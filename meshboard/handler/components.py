import kopf

from meshboard.configuration import configuration
from meshboard.exceptions import ManifestError
from meshboard.resources.manifests import Manifest


@kopf.on.startup()
def check_meshboard_components(logger, **kwargs) -> None:
    """
    Checks that the ServiceMeshControlPlane manifest can be rendered before any tenant is handled
    """
    logger.info(
        f"Starting Meshboard with the following configuration: {configuration}"
    )
    try:
        manifest = Manifest.from_path(configuration.SMCP_MANIFEST)
    except ManifestError as e:
        logger.error(str(e))
        raise kopf.PermanentError(str(e))
    logger.info(
        f"Loaded {len(manifest.resources)} object(s) from {configuration.SMCP_MANIFEST}"
    )

from meshboard.servicemesh.onboarding import (  # noqa
    ServiceMeshOnboarding,
    apply_service_mesh,
    remove_service_mesh,
)
from meshboard.servicemesh.ownership import OwnerRef, owner_request  # noqa

from typing import Optional

from statemachine import State, StateMachine

from meshboard.exceptions import MemberRollConflictError
from meshboard.servicemesh.controlplane import (
    check_control_plane_ready,
    install_control_plane,
)
from meshboard.servicemesh.memberroll import (
    check_member_roll_ready,
    install_member_roll,
)
from meshboard.servicemesh.namespace import (
    delete_ingress_namespace,
    ensure_ingress_namespace,
)
from meshboard.servicemesh.ownership import OwnerRef
from meshboard.utils import ingress_namespace


class ServiceMeshOnboarding(StateMachine):
    """
    The progress of one onboarding run of a tenant into the service mesh
    Every run starts over from the initial state, nothing is persisted between runs
    """

    namespace_missing = State("Namespace missing", initial=True, value="NamespaceMissing")
    namespace_ready = State("Namespace ready", value="NamespaceReady")
    control_plane_pending = State("Control plane pending", value="ControlPlanePending")
    control_plane_ready = State("Control plane ready", value="ControlPlaneReady")
    member_roll_pending = State("Membership pending", value="MembershipPending")
    member_roll_ready = State("Membership ready", value="MembershipReady")
    completed = State("Done", final=True, value="Done")

    namespace_provisioned = namespace_missing.to(namespace_ready)
    control_plane_installed = namespace_ready.to(control_plane_pending)
    control_plane_confirmed = control_plane_pending.to(control_plane_ready)
    member_roll_registered = control_plane_ready.to(member_roll_pending)
    member_roll_confirmed = member_roll_pending.to(member_roll_ready)
    onboarding_completed = member_roll_ready.to(completed)

    def __init__(self, owner: OwnerRef, logger=None):
        self.owner = owner
        self.logger = logger
        super().__init__()

    def on_enter_state(self, target):
        if self.logger:
            self.logger.debug(
                f"Service mesh onboarding of {self.owner.namespace}/{self.owner.name}: {target.value}"
            )


def apply_service_mesh(
    logger,
    owner: OwnerRef,
    manifest_path: str,
    progress: Optional[ServiceMeshOnboarding] = None,
) -> ServiceMeshOnboarding:
    """
    It onboards the namespace of a tenant into the service mesh; every step is idempotent and the first failing step
    ends the run

    :param logger: a logger object
    :param owner: The tenant to onboard
    :param manifest_path: The path of the ServiceMeshControlPlane manifest
    :param progress: The state machine recording the progress of this run
    :raises NotReadyError: if the mesh has not yet caught up, the run has to be repeated later
    :raises MemberRollConflictError: if the tenant namespace is a member of another member roll
    :return: The progress of this run; a raised error carries the reached state value as `state`
    """
    if progress is None:
        progress = ServiceMeshOnboarding(owner, logger)
    try:
        _onboard(logger, owner, manifest_path, progress)
    except Exception as e:
        # the state reached before the failing step
        e.state = progress.current_state.value
        raise e
    return progress


def _onboard(
    logger, owner: OwnerRef, manifest_path: str, progress: ServiceMeshOnboarding
) -> None:
    logger.info("Creating namespace for service mesh")
    ensure_ingress_namespace(logger, owner.namespace)
    progress.namespace_provisioned()
    logger.info(f"Successfully created namespace {ingress_namespace(owner.namespace)}")

    logger.info("Installing ServiceMeshControlPlane")
    install_control_plane(logger, owner, manifest_path)
    progress.control_plane_installed()
    logger.info("Successfully installed ServiceMeshControlPlane")

    # the control plane has to be ready before the member roll is reconciled
    logger.info("Wait for ServiceMeshControlPlane condition to be ready")
    check_control_plane_ready(logger, owner.namespace)
    progress.control_plane_confirmed()
    logger.info("ServiceMeshControlPlane is ready")

    logger.info("Installing ServiceMeshMemberRoll")
    try:
        install_member_roll(logger, owner)
    except MemberRollConflictError as e:
        logger.warning(str(e))
        raise e
    progress.member_roll_registered()
    logger.info(
        f"Successfully installed ServiceMeshMemberRoll and configured {owner.namespace} namespace"
    )

    logger.info(
        f"Wait for ServiceMeshMemberRoll to update {owner.namespace} namespace into configured members"
    )
    check_member_roll_ready(logger, owner.namespace)
    progress.member_roll_confirmed()
    logger.info(f"Successfully configured {owner.namespace} namespace into configured members")

    progress.onboarding_completed()


def remove_service_mesh(logger, owner: OwnerRef) -> None:
    """
    It removes the ingress namespace of a tenant; the mesh objects in it are deleted along with the namespace

    :param logger: a logger object
    :param owner: The tenant to offboard
    """
    logger.info("Removing service mesh")
    if namespace := delete_ingress_namespace(logger, owner.namespace):
        logger.info(f"Removed namespace {namespace}")
    else:
        logger.info(f"Namespace {ingress_namespace(owner.namespace)} does not exist")

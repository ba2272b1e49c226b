"""Verification request status transitions."""

from verity.core.errors import ConflictError
from verity.models.verification import VerificationStatus

# Terminal states have no outgoing edges
ALLOWED_TRANSITIONS: dict[VerificationStatus, frozenset[VerificationStatus]] = {
    VerificationStatus.PENDING: frozenset(
        {VerificationStatus.APPROVED, VerificationStatus.REJECTED}
    ),
    VerificationStatus.APPROVED: frozenset(),
    VerificationStatus.REJECTED: frozenset(),
}


def can_transition(
    current: VerificationStatus | str, target: VerificationStatus | str
) -> bool:
    """
    Check whether a request may move from one status to another.

    Args:
        current: Current status
        target: Requested status

    Returns:
        True if the transition is allowed, False otherwise
    """
    try:
        current = VerificationStatus(current)
        target = VerificationStatus(target)
    except ValueError:
        return False

    return target in ALLOWED_TRANSITIONS[current]


def check_transition(
    current: VerificationStatus | str, target: VerificationStatus | str
) -> VerificationStatus:
    """
    Validate a status change without applying it.

    Callers persist the change themselves, conditioned on the row still
    holding ``current``.

    Args:
        current: Status the request was read with
        target: Requested status

    Returns:
        The target as a status member

    Raises:
        ConflictError: If the current status does not allow it
    """
    if not can_transition(current, target):
        raise ConflictError(
            f"Verification request is {getattr(current, 'value', current)} and cannot become "
            f"{VerificationStatus(target).value}."
        )

    return VerificationStatus(target)

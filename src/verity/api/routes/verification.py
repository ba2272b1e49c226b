"""Verification routes.

Each route resolves the caller from their session, translates usernames to
user IDs, applies the administrator gate where required and then calls
exactly one verification service operation that mutates state.
"""

from typing import Annotated

from fastapi import APIRouter, Query, status

from verity.api.deps import AppSettings, CurrentScope, DatabaseSession
from verity.core.auth import get_user_by_username
from verity.core.errors import NotFoundError, PermissionDeniedError
from verity.core.scope import can_access_request, require_admin
from verity.models import VerificationStatus
from verity.schemas.verification import (
    MessageResponse,
    VerificationCreatedResponse,
    VerificationListResponse,
    VerificationReject,
    VerificationRequestCreate,
    VerificationRequestResponse,
    VerificationStatusResponse,
)
from verity.services.verification_service import (
    approve_request,
    create_request,
    delete_request,
    get_request_by_id,
    get_request_by_subject,
    list_requests,
    reject_request,
)

router = APIRouter(prefix="/verification", tags=["verification"])

NO_REQUEST_STATUS = "No verification request found."


@router.post(
    "/request",
    response_model=VerificationCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
def submit_request(
    request_data: VerificationRequestCreate,
    scope: CurrentScope,
    db: DatabaseSession,
    settings: AppSettings,
):
    """
    Submit a verification request for the current user.

    Args:
        request_data: Credentials to be reviewed
        scope: Current user scope
        db: Database session
        settings: Application settings

    Returns:
        Confirmation message and the created request
    """
    return create_request(
        db,
        scope.user.id,
        request_data.credentials,
        uniqueness=settings.verification_uniqueness,
    )


@router.get("/status", response_model=VerificationStatusResponse)
def get_own_status(scope: CurrentScope, db: DatabaseSession):
    """
    Get the status of the current user's latest request.

    Having no request is a normal answer here, not an error.
    """
    try:
        request = get_request_by_subject(db, scope.user.id)
    except NotFoundError:
        return VerificationStatusResponse(status=NO_REQUEST_STATUS)

    return VerificationStatusResponse(status=request.status)


@router.get("/view", response_model=VerificationRequestResponse)
def view_own_request(scope: CurrentScope, db: DatabaseSession):
    """Get the current user's latest request."""
    return get_request_by_subject(db, scope.user.id)


@router.get("/users/{username}", response_model=VerificationRequestResponse)
def view_user_request(username: str, scope: CurrentScope, db: DatabaseSession):
    """
    Get a user's latest request.

    Args:
        username: Subject's username
        scope: Current user scope
        db: Database session

    Returns:
        The subject's latest request
    """
    subject = get_user_by_username(db, username)
    return get_request_by_subject(db, subject.id)


@router.get("/requests", response_model=VerificationListResponse)
def list_all_requests(
    scope: CurrentScope,
    db: DatabaseSession,
    request_status: Annotated[VerificationStatus | None, Query(alias="status")] = None,
):
    """
    List requests for review. Administrators only.

    Args:
        scope: Current user scope
        db: Database session
        request_status: Optional status filter (``?status=pending``)

    Returns:
        Matching requests, newest first
    """
    require_admin(db, scope, "list requests")
    return VerificationListResponse(data=list_requests(db, request_status))


@router.get("/requests/{request_id}", response_model=VerificationRequestResponse)
def view_request(request_id: int, scope: CurrentScope, db: DatabaseSession):
    """Get a request by ID. Visible to its subject and administrators."""
    request = get_request_by_id(db, request_id)
    if not can_access_request(db, scope, request):
        raise PermissionDeniedError("You do not have permission to view this request.")
    return request


@router.post("/approve/{username}", response_model=MessageResponse)
def approve(username: str, scope: CurrentScope, db: DatabaseSession):
    """
    Approve a user's pending request. Administrators only.

    Args:
        username: Subject's username
        scope: Current user scope
        db: Database session

    Returns:
        Confirmation message
    """
    subject = get_user_by_username(db, username)
    get_request_by_subject(db, subject.id)
    require_admin(db, scope, "approve requests")

    return approve_request(db, subject.id, reviewer_id=scope.user.id)


@router.post("/reject/{username}", response_model=MessageResponse)
def reject(
    username: str,
    scope: CurrentScope,
    db: DatabaseSession,
    rejection: VerificationReject | None = None,
):
    """
    Reject a user's pending request. Administrators only.

    Args:
        username: Subject's username
        scope: Current user scope
        db: Database session
        rejection: Optional reason shown to the subject

    Returns:
        Confirmation message, including the reason when given
    """
    subject = get_user_by_username(db, username)
    get_request_by_subject(db, subject.id)
    require_admin(db, scope, "reject requests")

    reason = rejection.reason if rejection else None
    return reject_request(db, subject.id, reason=reason, reviewer_id=scope.user.id)


@router.delete("/requests/{request_id}", response_model=MessageResponse)
def remove_request(request_id: int, scope: CurrentScope, db: DatabaseSession):
    """
    Delete a request. Its subject and administrators may do so.

    Unknown IDs succeed, matching the service's delete semantics.
    """
    try:
        request = get_request_by_id(db, request_id)
    except NotFoundError:
        request = None

    if request is not None and not can_access_request(db, scope, request):
        raise PermissionDeniedError("You do not have permission to delete this request.")

    return delete_request(db, request_id)

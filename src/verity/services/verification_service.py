"""Verification request lifecycle: submission, review and removal."""

import logging
from datetime import UTC, datetime
from typing import Any, Literal

from opentelemetry import metrics, trace
from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from verity.core.errors import ConflictError, InvalidInputError, NotFoundError
from verity.core.lifecycle import check_transition
from verity.models import VerificationRequest, VerificationStatus
from verity.models.verification import PENDING_SUBJECT_INDEX
from verity.telemetry import set_span_attributes

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)
meter = metrics.get_meter(__name__)

transitions_counter = meter.create_counter(
    "verification.transitions",
    description="Verification requests moved out of pending, by target status",
)

UniquenessScope = Literal["pending", "any"]


def create_request(
    db: Session,
    subject_id: int,
    credentials: str,
    uniqueness: UniquenessScope = "pending",
) -> dict[str, Any]:
    """
    Submit a new verification request for a subject.

    Args:
        db: Database session
        subject_id: ID of the user being verified
        credentials: Opaque proof supplied by the subject
        uniqueness: "pending" blocks only while a pending request exists;
            "any" blocks while the subject has any request at all

    Returns:
        Dict with a confirmation message and the created request

    Raises:
        InvalidInputError: If subject or credentials are empty
        ConflictError: If the subject already has a blocking request
    """
    with tracer.start_as_current_span("verification.create_request") as span:
        set_span_attributes(
            span,
            **{"verification.subject_id": subject_id, "verification.uniqueness": uniqueness},
        )

        if not subject_id or not credentials or not credentials.strip():
            raise InvalidInputError("Subject and credentials must be non-empty!")

        stmt = select(VerificationRequest).where(VerificationRequest.subject_id == subject_id)
        if uniqueness == "pending":
            stmt = stmt.where(VerificationRequest.status == VerificationStatus.PENDING.value)
        if db.execute(stmt.limit(1)).scalar_one_or_none():
            logger.warning(
                f"Rejected verification submission for user {subject_id}: "
                f"existing request blocks it (uniqueness={uniqueness})"
            )
            raise ConflictError(_conflict_message(uniqueness))

        request = VerificationRequest(
            subject_id=subject_id,
            credentials=credentials,
            status=VerificationStatus.PENDING.value,
        )
        db.add(request)
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            if not _violates_pending_index(e):
                raise
            # A concurrent submission won the partial unique index
            logger.warning(f"Concurrent verification submission for user {subject_id}")
            raise ConflictError(_conflict_message("pending")) from e
        db.refresh(request)

        set_span_attributes(span, **{"verification.request_id": request.id})
        logger.info(f"Verification request {request.id} created for user {subject_id}")

        return {"message": "Verification request created successfully!", "request": request}


def _violates_pending_index(error: IntegrityError) -> bool:
    constraint = getattr(getattr(error.orig, "diag", None), "constraint_name", None)
    if constraint:
        return constraint == PENDING_SUBJECT_INDEX
    # SQLite names the indexed column instead of the index
    return "UNIQUE constraint failed: verification_requests.subject_id" in str(error.orig)


def _conflict_message(uniqueness: UniquenessScope) -> str:
    if uniqueness == "any":
        return "This user already has a verification request!"
    return "This user already has a pending verification request!"


def get_request_by_subject(db: Session, subject_id: int) -> VerificationRequest:
    """
    Get the most recent verification request for a subject.

    Raises:
        NotFoundError: If the subject has never submitted one
    """
    stmt = (
        select(VerificationRequest)
        .where(VerificationRequest.subject_id == subject_id)
        .order_by(VerificationRequest.id.desc())
        .limit(1)
    )
    request = db.execute(stmt).scalar_one_or_none()
    if request is None:
        raise NotFoundError("Verification request not found.")
    return request


def get_request_by_id(db: Session, request_id: int) -> VerificationRequest:
    """
    Get a verification request by ID.

    Raises:
        NotFoundError: If no request has that ID
    """
    stmt = select(VerificationRequest).where(VerificationRequest.id == request_id)
    request = db.execute(stmt).scalar_one_or_none()
    if request is None:
        raise NotFoundError("Verification request not found.")
    return request


def list_requests(
    db: Session, status: VerificationStatus | None = None
) -> list[VerificationRequest]:
    """List verification requests, newest first, optionally filtered by status."""
    stmt = select(VerificationRequest).order_by(VerificationRequest.id.desc())
    if status:
        stmt = stmt.where(VerificationRequest.status == VerificationStatus(status).value)
    return list(db.execute(stmt).scalars().all())


def approve_request(
    db: Session, subject_id: int, reviewer_id: int | None = None
) -> dict[str, str]:
    """
    Approve a subject's pending verification request.

    Raises:
        NotFoundError: If the subject has no request
        ConflictError: If the request was already approved or rejected
    """
    with tracer.start_as_current_span("verification.approve_request") as span:
        set_span_attributes(
            span,
            **{"verification.subject_id": subject_id, "verification.reviewer_id": reviewer_id},
        )
        _review(db, subject_id, VerificationStatus.APPROVED, reviewer_id)

        return {"message": "Verification request approved successfully!"}


def reject_request(
    db: Session,
    subject_id: int,
    reason: str | None = None,
    reviewer_id: int | None = None,
) -> dict[str, str]:
    """
    Reject a subject's pending verification request.

    The reason, when given, is stored and echoed verbatim in the message.

    Raises:
        NotFoundError: If the subject has no request
        ConflictError: If the request was already approved or rejected
    """
    with tracer.start_as_current_span("verification.reject_request") as span:
        set_span_attributes(
            span,
            **{"verification.subject_id": subject_id, "verification.reviewer_id": reviewer_id},
        )
        _review(db, subject_id, VerificationStatus.REJECTED, reviewer_id, note=reason)

        if reason:
            return {"message": f"Verification request rejected. Reason: {reason}"}
        return {"message": "Verification request rejected."}


def _review(
    db: Session,
    subject_id: int,
    target: VerificationStatus,
    reviewer_id: int | None,
    note: str | None = None,
) -> VerificationRequest:
    request = get_request_by_subject(db, subject_id)
    request_id, current = request.id, request.status
    target = check_transition(current, target)

    values = {
        "status": target.value,
        "reviewed_by_id": reviewer_id,
        "reviewed_at": datetime.now(UTC),
    }
    if note:
        values["review_note"] = note

    # Only applies while the row still holds the status read above
    result = db.execute(
        update(VerificationRequest)
        .where(VerificationRequest.id == request_id, VerificationRequest.status == current)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.rollback()
        logger.warning(
            f"Verification request {request_id} for user {subject_id} changed before it "
            f"could become {target.value}"
        )
        raise ConflictError("Verification request changed while it was being reviewed.")
    db.commit()
    db.refresh(request)

    transitions_counter.add(1, {"status": target.value})
    logger.info(
        f"Verification request {request.id} for user {subject_id} {target.value}"
        f" by reviewer {reviewer_id}"
    )
    return request


def delete_request(db: Session, request_id: int) -> dict[str, str]:
    """
    Delete a verification request. Deleting an unknown ID is not an error.
    """
    result = db.execute(delete(VerificationRequest).where(VerificationRequest.id == request_id))
    db.commit()

    if result.rowcount:
        logger.info(f"Verification request {request_id} deleted")
    return {"message": "Verification request deleted!"}

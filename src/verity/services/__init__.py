"""Service layer."""
from verity.services.verification_service import (
    approve_request,
    create_request,
    delete_request,
    get_request_by_id,
    get_request_by_subject,
    list_requests,
    reject_request,
)

__all__ = [
    "create_request",
    "get_request_by_subject",
    "get_request_by_id",
    "list_requests",
    "approve_request",
    "reject_request",
    "delete_request",
]

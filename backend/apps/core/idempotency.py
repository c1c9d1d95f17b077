"""Replay protection for operator submissions that are not idempotent by themselves.

A terminal that retries a request with the same Idempotency-Key gets the stored
response back instead of applying the same stock movement twice.
"""

import json

from django.utils import timezone

from apps.core.exceptions import ValidationError
from apps.core.models import IdempotentRequest


def normalize_payload(data):
    return json.loads(json.dumps(data, default=str))


def find_completed_request(operation: str, idempotency_key: str | None, payload=None):
    """Completed request for this key, or None; a key reused with a different payload is rejected."""
    if not idempotency_key:
        return None
    existing = (
        IdempotentRequest.objects.filter(
            operation=operation,
            idempotency_key=idempotency_key,
            status=IdempotentRequest.Status.COMPLETED,
        )
        .order_by("-started_at")
        .first()
    )
    if existing and payload is not None and existing.payload != normalize_payload(payload):
        raise ValidationError(
            "Idempotency-Key was already used for a different request.",
            field="idempotency_key",
        )
    return existing


def start_request(operation: str, idempotency_key: str, payload) -> IdempotentRequest:
    return IdempotentRequest.objects.create(
        operation=operation,
        idempotency_key=idempotency_key,
        status=IdempotentRequest.Status.STARTED,
        payload=normalize_payload(payload),
    )


def complete_request(record: IdempotentRequest, status_code: int, data) -> None:
    record.status = IdempotentRequest.Status.COMPLETED
    record.finished_at = timezone.now()
    record.result = {
        "status_code": status_code,
        "data": normalize_payload(data),
    }
    record.save(update_fields=["status", "finished_at", "result", "updated_at"])


def fail_request(record: IdempotentRequest, status_code: int, errors) -> None:
    record.status = IdempotentRequest.Status.FAILED
    record.finished_at = timezone.now()
    record.result = {
        "status_code": status_code,
        "errors": normalize_payload(errors),
    }
    record.save(update_fields=["status", "finished_at", "result", "updated_at"])

from django.core.exceptions import ValidationError as DjangoValidationError

from apps.core.exceptions import NotFound


def get_or_not_found(queryset, message: str, **lookup):
    try:
        return queryset.get(**lookup)
    except (queryset.model.DoesNotExist, DjangoValidationError, ValueError, TypeError) as exc:
        raise NotFound(message) from exc


def ensure_exists(queryset, message: str, **lookup) -> None:
    try:
        found = queryset.filter(**lookup).exists()
    except (DjangoValidationError, ValueError, TypeError) as exc:
        raise NotFound(message) from exc
    if not found:
        raise NotFound(message)

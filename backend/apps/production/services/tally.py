"""Hour-bucketed production counters.

One bucket row per (machine, hour). Counts are added with an arithmetic UPDATE;
the first count of an hour inserts the row inside a savepoint and, if another
terminal inserted it first, falls back to the UPDATE. Nothing reads a count and
writes it back.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from django.db import IntegrityError, transaction
from django.db.models import F, Sum
from django.utils import timezone

from apps.core.exceptions import ledger_transaction
from apps.core.lookups import ensure_exists
from apps.core.validation import coerce_whole_number
from apps.production.models import Machine, ProductionTallyBucket

logger = logging.getLogger(__name__)


def floor_to_hour(moment: datetime | None = None) -> datetime:
    moment = moment or timezone.now()
    if timezone.is_naive(moment):
        moment = timezone.make_aware(moment)
    return timezone.localtime(moment).replace(minute=0, second=0, microsecond=0)


def _increment(machine_id, hour: datetime, count: int) -> int:
    return ProductionTallyBucket.objects.filter(machine_id=machine_id, hour_timestamp=hour).update(
        count=F("count") + count,
        updated_at=timezone.now(),
    )


def add_production(machine_id, count: Any, occurred_at: datetime | None = None) -> int:
    """Add count to the machine's bucket for the hour of occurred_at and return the bucket total."""
    count = coerce_whole_number(count, "count")
    hour = floor_to_hour(occurred_at)

    with ledger_transaction():
        ensure_exists(Machine.objects, "Machine not found.", pk=machine_id)
        if not _increment(machine_id, hour, count):
            try:
                with transaction.atomic():
                    ProductionTallyBucket.objects.create(machine_id=machine_id, hour_timestamp=hour, count=count)
            except IntegrityError:
                # Another terminal created the bucket between our UPDATE and INSERT.
                _increment(machine_id, hour, count)
        total = get_for_machine(machine_id, hour)

    logger.info("Tally +%s for machine %s at %s -> %s", count, machine_id, hour.isoformat(), total)
    return total


def get_for_machine(machine_id, hour: datetime | None = None) -> int:
    hour = floor_to_hour(hour)
    ensure_exists(Machine.objects, "Machine not found.", pk=machine_id)
    result = ProductionTallyBucket.objects.filter(machine_id=machine_id, hour_timestamp=hour).aggregate(
        total=Sum("count")
    )
    return result["total"] or 0


def hour_totals(hour: datetime | None = None) -> dict[str, int]:
    """Per-machine totals for one hour, keyed by machine id; machines without counts are omitted."""
    hour = floor_to_hour(hour)
    rows = (
        ProductionTallyBucket.objects.filter(hour_timestamp=hour)
        .values("machine_id")
        .annotate(total=Sum("count"))
        .order_by("machine_id")
    )
    return {str(row["machine_id"]): row["total"] for row in rows}

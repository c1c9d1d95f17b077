"""Machine status and product assignment.

Status is a free four-state switch; any state can follow any other. Assigning a
product (or clearing it) always restarts progress tracking at zero.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from django.db import IntegrityError

from apps.core.exceptions import ValidationError, ledger_transaction
from apps.core.lookups import get_or_not_found
from apps.core.validation import coerce_whole_number, require_text
from apps.inventory.models import Product
from apps.production.models import Machine, MachineStatus

logger = logging.getLogger(__name__)

MACHINE_NAME_PATTERN = re.compile(r"(\D+)(\d+)")


def machine_sort_key(name: str):
    """ISBM2 sorts before ISBM10; names without a numeric suffix sort by text."""
    match = MACHINE_NAME_PATTERN.match(name.strip())
    if not match:
        return (name, -1)
    prefix, number = match.groups()
    return (prefix, int(number))


def list_machines() -> list[Machine]:
    machines = list(Machine.objects.select_related("current_product"))
    return sorted(machines, key=lambda machine: machine_sort_key(machine.name))


def get_machine(machine_id) -> Machine:
    return get_or_not_found(Machine.objects.select_related("current_product"), "Machine not found.", pk=machine_id)


def _lock_machine(machine_id) -> Machine:
    return get_or_not_found(Machine.objects.select_for_update(), "Machine not found.", pk=machine_id)


def create_machine(name: str, cavities: Any) -> Machine:
    name = require_text(name, "name")
    cavities = coerce_whole_number(cavities, "cavities")
    try:
        with ledger_transaction():
            machine = Machine.objects.create(name=name, cavities=cavities, status=MachineStatus.PRODUCING)
    except IntegrityError as exc:
        raise ValidationError(f"A machine named {name} already exists.", field="name") from exc
    logger.info("Created machine %s with %s cavities", name, cavities)
    return machine


def update_machine(machine_id, name: str | None = None, cavities: Any = None) -> Machine:
    update_fields = ["updated_at"]
    try:
        with ledger_transaction():
            machine = _lock_machine(machine_id)
            if name is not None:
                machine.name = require_text(name, "name")
                update_fields.append("name")
            if cavities is not None:
                machine.cavities = coerce_whole_number(cavities, "cavities")
                update_fields.append("cavities")
            machine.save(update_fields=update_fields)
    except IntegrityError as exc:
        raise ValidationError(f"A machine named {name} already exists.", field="name") from exc
    logger.info("Machine %s updated (%s)", machine.name, ", ".join(update_fields[1:]) or "no changes")
    return machine


def set_status(machine_id, status: str) -> Machine:
    if status not in MachineStatus.values:
        raise ValidationError(f"Status must be one of: {', '.join(MachineStatus.values)}.", field="status")
    with ledger_transaction():
        machine = _lock_machine(machine_id)
        previous = machine.status
        machine.status = status
        machine.save(update_fields=["status", "updated_at"])
    logger.info("Machine %s status %s -> %s", machine.name, previous, status)
    return machine


def assign_product(machine_id, product_id=None, quantity_ordered: Any = 0) -> Machine:
    """Point the machine at a product (or none) and restart its progress count."""
    if product_id is None:
        quantity = 0
    else:
        quantity = coerce_whole_number(quantity_ordered or 0, "quantity_ordered", minimum=0)

    with ledger_transaction():
        machine = _lock_machine(machine_id)
        product = None
        if product_id is not None:
            product = get_or_not_found(Product.objects.all(), "Product not found.", pk=product_id)
        machine.current_product = product
        machine.quantity_ordered = quantity
        machine.quantity_produced = 0
        machine.save(update_fields=["current_product", "quantity_ordered", "quantity_produced", "updated_at"])

    logger.info(
        "Machine %s assigned to %s (ordered=%s), progress reset",
        machine.name,
        product.name if product else "nothing",
        quantity,
    )
    return machine


def set_quantity_produced(machine_id, quantity_produced: Any) -> Machine:
    """Record order progress reported by the caller; independent of the hourly tally."""
    quantity = coerce_whole_number(quantity_produced, "quantity_produced", minimum=0)
    with ledger_transaction():
        machine = _lock_machine(machine_id)
        machine.quantity_produced = quantity
        machine.save(update_fields=["quantity_produced", "updated_at"])
    logger.info("Machine %s progress %s/%s", machine.name, quantity, machine.quantity_ordered)
    return machine

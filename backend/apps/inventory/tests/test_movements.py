import threading
import unittest
from datetime import datetime, timedelta, timezone as dt_timezone
from decimal import Decimal
from fractions import Fraction
from unittest.mock import patch

from django.db import connection
from django.test import TestCase, TransactionTestCase

from apps.core.exceptions import InsufficientStock, NotFound, ValidationError
from apps.inventory.models import InventoryMovement, MovementType, Product
from apps.inventory.services import movements


class MovementEngineTests(TestCase):
    def setUp(self):
        self.product = Product.objects.create(name="Preform 28g", pieces_per_package=200, total_pieces=1000)

    def test_exit_above_stock_is_rejected_and_leaves_product_unchanged(self):
        with self.assertRaises(InsufficientStock):
            movements.apply_movement(self.product.id, MovementType.EXIT, 1200, actor_id="op-1")

        self.product.refresh_from_db()
        self.assertEqual(self.product.total_pieces, 1000)
        self.assertEqual(self.product.pallets, 5)
        self.assertEqual(InventoryMovement.objects.count(), 0)

    def test_exit_updates_total_and_fractional_pallets(self):
        product = movements.apply_movement(self.product.id, MovementType.EXIT, 300, actor_id="op-1")

        self.assertEqual(product.total_pieces, 700)
        self.assertEqual(product.pallets, Fraction(7, 2))
        self.assertEqual(float(product.pallets), 3.5)

    def test_entry_adds_pieces_and_appends_movement(self):
        product = movements.apply_movement(self.product.id, "entry", 250, actor_id="op-2")

        self.assertEqual(product.total_pieces, 1250)
        movement = InventoryMovement.objects.get()
        self.assertEqual(movement.product_id, self.product.id)
        self.assertEqual(movement.movement_type, MovementType.ENTRY)
        self.assertEqual(movement.quantity_pieces, 250)
        self.assertEqual(movement.actor_id, "op-2")
        self.assertEqual(movement.created_at, product.updated_at)

    def test_exit_of_entire_stock_reaches_zero(self):
        product = movements.apply_movement(self.product.id, MovementType.EXIT, 1000)

        self.assertEqual(product.total_pieces, 0)
        self.assertEqual(product.pallets, 0)

    def test_pallets_match_total_over_pieces_per_package_after_every_movement(self):
        product = Product.objects.create(name="Cap 38mm", pieces_per_package=3, total_pieces=0)
        steps = [(MovementType.ENTRY, 10), (MovementType.EXIT, 4), (MovementType.ENTRY, 1), (MovementType.EXIT, 7)]

        for movement_type, quantity in steps:
            product = movements.apply_movement(product.id, movement_type, quantity)
            self.assertGreaterEqual(product.total_pieces, 0)
            self.assertEqual(product.pallets, Fraction(product.total_pieces, product.pieces_per_package))

        self.assertEqual(product.total_pieces, 0)

    def test_invalid_quantities_are_rejected_before_any_write(self):
        for quantity in (0, -5, 2.5, Decimal("1.5"), "10", True, None):
            with self.subTest(quantity=quantity):
                with self.assertRaises(ValidationError):
                    movements.apply_movement(self.product.id, MovementType.ENTRY, quantity)

        self.product.refresh_from_db()
        self.assertEqual(self.product.total_pieces, 1000)
        self.assertEqual(InventoryMovement.objects.count(), 0)

    def test_quantity_beyond_column_range_is_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            movements.apply_movement(self.product.id, MovementType.ENTRY, 3_000_000_000)

        self.assertEqual(ctx.exception.field, "quantity_pieces")
        self.product.refresh_from_db()
        self.assertEqual(self.product.total_pieces, 1000)
        self.assertFalse(InventoryMovement.objects.exists())

    def test_integral_float_quantity_is_accepted(self):
        product = movements.apply_movement(self.product.id, MovementType.ENTRY, 20.0)

        self.assertEqual(product.total_pieces, 1020)

    def test_unknown_movement_type_is_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            movements.apply_movement(self.product.id, "transfer", 10)

        self.assertEqual(ctx.exception.field, "movement_type")

    def test_unknown_product_raises_not_found(self):
        with self.assertRaises(NotFound):
            movements.apply_movement("00000000-0000-0000-0000-000000000000", MovementType.ENTRY, 10)

    def test_malformed_product_id_raises_not_found(self):
        with self.assertRaises(NotFound):
            movements.apply_movement("not-a-uuid", MovementType.ENTRY, 10)

    def test_identical_calls_create_distinct_movements(self):
        movements.apply_movement(self.product.id, MovementType.ENTRY, 100, actor_id="op-1")
        product = movements.apply_movement(self.product.id, MovementType.ENTRY, 100, actor_id="op-1")

        self.assertEqual(product.total_pieces, 1200)
        self.assertEqual(InventoryMovement.objects.count(), 2)

    def test_movement_in_pallets_rounds_to_pieces(self):
        product = movements.apply_movement_in_pallets(self.product.id, MovementType.EXIT, Decimal("1.25"))

        self.assertEqual(product.total_pieces, 750)
        self.assertEqual(InventoryMovement.objects.get().quantity_pieces, 250)

    def test_movement_in_pallets_rounds_half_up(self):
        product = Product.objects.create(name="Handle", pieces_per_package=3, total_pieces=0)

        product = movements.apply_movement_in_pallets(product.id, MovementType.ENTRY, Decimal("0.5"))

        self.assertEqual(product.total_pieces, 2)

    def test_list_movements_newest_first_and_filtered_by_product(self):
        other = Product.objects.create(name="Preform 32g", pieces_per_package=100, total_pieces=0)
        start = datetime(2026, 10, 19, 8, 0, tzinfo=dt_timezone.utc)
        stamps = [start, start + timedelta(minutes=1), start + timedelta(minutes=2)]

        with patch("apps.inventory.services.movements.timezone.now", side_effect=stamps):
            movements.apply_movement(self.product.id, MovementType.ENTRY, 1)
            movements.apply_movement(other.id, MovementType.ENTRY, 2)
            movements.apply_movement(self.product.id, MovementType.EXIT, 3)

        everything = movements.list_movements()
        self.assertEqual([m.quantity_pieces for m in everything], [3, 2, 1])

        only_first = movements.list_movements(product_id=self.product.id, limit=1)
        self.assertEqual([m.quantity_pieces for m in only_first], [3])

    def test_list_movements_for_unknown_product_raises_not_found(self):
        with self.assertRaises(NotFound):
            movements.list_movements(product_id="00000000-0000-0000-0000-000000000000")


@unittest.skipUnless(connection.vendor == "postgresql", "row-level locking needs PostgreSQL")
class ConcurrentMovementTests(TransactionTestCase):
    def test_parallel_exits_never_oversell(self):
        product = Product.objects.create(name="Preform 40g", pieces_per_package=10, total_pieces=100)
        results = []

        def run():
            try:
                movements.apply_movement(product.id, MovementType.EXIT, 20)
                results.append("ok")
            except InsufficientStock:
                results.append("rejected")
            finally:
                connection.close()

        threads = [threading.Thread(target=run) for _ in range(10)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        product.refresh_from_db()
        self.assertEqual(results.count("ok"), 5)
        self.assertEqual(results.count("rejected"), 5)
        self.assertEqual(product.total_pieces, 0)
        self.assertEqual(InventoryMovement.objects.filter(product=product).count(), 5)

from datetime import date

from django.test import TestCase
from rest_framework.test import APIClient

from apps.core.exceptions import ValidationError
from apps.production.models import ShiftComment, ShiftReport
from apps.production.services import shifts


class ShiftServiceTests(TestCase):
    def test_comment_upsert_keeps_one_row_per_shift(self):
        shifts.upsert_shift_comment(date(2026, 10, 19), 1, "Mold change on ISBM3")
        comment = shifts.upsert_shift_comment(date(2026, 10, 19), "1", "ISBM3 back at 09:40")

        self.assertEqual(ShiftComment.objects.count(), 1)
        self.assertEqual(comment.comments, "ISBM3 back at 09:40")
        self.assertIsNone(shifts.get_shift_comment(date(2026, 10, 19), 2))

    def test_shift_number_must_be_one_to_three(self):
        for shift in (0, 4, "night", None):
            with self.subTest(shift=shift):
                with self.assertRaises(ValidationError):
                    shifts.upsert_shift_comment(date(2026, 10, 19), shift, "x")

    def test_report_create_update_delete(self):
        report = shifts.create_shift_report(
            date(2026, 10, 19),
            2,
            machine_name="ISBM1",
            product_name="Preform 28g",
            production_goal=4000,
        )
        self.assertEqual(report.production_achieved, 0)

        with self.assertLogs("apps.production.services.shifts", "INFO") as logs:
            report = shifts.update_shift_report(report.id, production_achieved=3850, notes=" ok ")
        self.assertIn("production_achieved", logs.output[-1])
        self.assertEqual(report.production_achieved, 3850)
        self.assertEqual(report.notes, "ok")

        self.assertEqual(len(shifts.list_shift_reports(date(2026, 10, 19), 2)), 1)
        shifts.delete_shift_report(report.id)
        self.assertFalse(ShiftReport.objects.exists())

    def test_report_rejects_unknown_fields(self):
        with self.assertRaises(ValidationError) as ctx:
            shifts.create_shift_report(date(2026, 10, 19), 1, machine_name="ISBM1", operator="x")

        self.assertEqual(ctx.exception.field, "operator")


class ShiftApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.client.credentials(HTTP_X_API_KEY="dev-api-key")

    def test_missing_comment_reads_as_empty(self):
        response = self.client.get("/api/v1/shift-comments/?date=2026-10-19&shift=3")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["comments"], "")
        self.assertIsNone(response.json()["id"])

    def test_put_comment_twice_updates_in_place(self):
        payload = {"comment_date": "2026-10-19", "shift_number": 1, "comments": "first"}
        self.client.put("/api/v1/shift-comments/", payload, format="json")
        payload["comments"] = "second"
        response = self.client.put("/api/v1/shift-comments/", payload, format="json")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["comments"], "second")
        self.assertEqual(ShiftComment.objects.count(), 1)

        read = self.client.get("/api/v1/shift-comments/?date=2026-10-19&shift=1")
        self.assertEqual(read.json()["comments"], "second")

    def test_comment_query_requires_valid_shift(self):
        response = self.client.get("/api/v1/shift-comments/?date=2026-10-19&shift=5")

        self.assertEqual(response.status_code, 400)
        self.assertIn("shift", response.json()["field_errors"])

    def test_report_endpoints(self):
        created = self.client.post(
            "/api/v1/shift-reports/",
            {
                "report_date": "2026-10-19",
                "shift_number": 2,
                "machine_name": "ISBM2",
                "cycle_time": "12.5s",
                "production_goal": 4000,
            },
            format="json",
        )
        self.assertEqual(created.status_code, 201)
        report_id = created.json()["id"]

        patched = self.client.patch(
            f"/api/v1/shift-reports/{report_id}/",
            {"production_achieved": 3990},
            format="json",
        )
        self.assertEqual(patched.status_code, 200)
        self.assertEqual(patched.json()["production_achieved"], 3990)

        listing = self.client.get("/api/v1/shift-reports/?date=2026-10-19&shift=2")
        self.assertEqual([row["machine_name"] for row in listing.json()], ["ISBM2"])

        deleted = self.client.delete(f"/api/v1/shift-reports/{report_id}/")
        self.assertEqual(deleted.status_code, 204)

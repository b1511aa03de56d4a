import unittest
from unittest import mock

from app.config import settings
from app.core.aggregates import fetch_svg_totals, fetch_project_totals, summarize_svgs, SvgTotals
from tests.fakes import FakeSupabase


class AggregateTests(unittest.TestCase):
    def setUp(self):
        self.db = FakeSupabase()
        self.db.table("svgs").insert([
            {"user_id": "u1", "project_id": "p1", "views": 3, "downloads": 1, "favorited": True, "file_size": 100},
            {"user_id": "u1", "project_id": "p1", "views": 2, "downloads": 0, "favorited": False, "file_size": 50},
            {"user_id": "u1", "project_id": "p2", "views": 0, "downloads": 4, "favorited": True, "file_size": None},
            {"user_id": "u2", "project_id": "p3", "views": 9, "downloads": 9, "favorited": True, "file_size": 999},
        ]).execute()
        self.expected = SvgTotals(
            svg_count=3, total_views=5, total_downloads=5, total_favorites=2, total_size=150
        )

    def test_backend_aggregates(self):
        totals = fetch_svg_totals(self.db, lambda q: q.eq("user_id", "u1"))

        self.assertEqual(totals, self.expected)

    def test_row_scan_fallback_pages_through_rows(self):
        self.db.aggregates_enabled = False
        self.db.ops.clear()

        with mock.patch.object(settings, "aggregate_page_size", 2):
            totals = fetch_svg_totals(self.db, lambda q: q.eq("user_id", "u1"))

        self.assertEqual(totals, self.expected)
        # one rejected aggregate query, then two pages
        self.assertEqual(self.db.ops_for("svgs"), ["select", "select", "select"])

    def test_empty_selection_is_zero(self):
        totals = fetch_svg_totals(self.db, lambda q: q.eq("user_id", "nobody"))

        self.assertEqual(totals, SvgTotals())

    def test_grouped_by_project(self):
        for enabled in (True, False):
            with self.subTest(aggregates=enabled):
                self.db.aggregates_enabled = enabled

                totals = fetch_project_totals(self.db, ["p1", "p2"])

                self.assertEqual(set(totals), {"p1", "p2"})
                self.assertEqual(totals["p1"].svg_count, 2)
                self.assertEqual(totals["p1"].total_favorites, 1)
                self.assertEqual(totals["p2"].total_downloads, 4)
                self.assertEqual(totals["p2"].total_favorites, 1)

    def test_summarize_rows(self):
        totals = summarize_svgs([{"views": None, "favorited": True}, {"views": 4, "file_size": 10}])

        self.assertEqual(totals.as_dict(), {
            "svg_count": 2, "total_views": 4, "total_downloads": 0, "total_favorites": 1, "total_size": 10,
        })

import unittest
from unittest import mock

from app.config import settings
from app.modules.uploads.service import is_svg_file
from tests.base import ApiTestCase, ARROW_SVG, PNG_BYTES


class IsSvgFileTests(unittest.TestCase):
    def test_accepts_mime_type_or_extension(self):
        self.assertTrue(is_svg_file("icon.svg", "application/octet-stream"))
        self.assertTrue(is_svg_file("ICON.SVG", None))
        self.assertTrue(is_svg_file("icon", "image/svg+xml"))
        self.assertFalse(is_svg_file("icon.png", "image/png"))


class UploadRoutesTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.alice = self.sign_in("alice@example.com")
        self.project = self.create_project(self.alice, "Icons")
        self.db.ops.clear()

    def test_png_is_rejected_before_any_network_call(self):
        response = self.upload(self.alice, self.project["id"], files=[("photo.png", PNG_BYTES, "image/png")])

        self.assertEqual(response.status_code, 400)
        self.assertEqual([t for t, _ in self.db.ops if t != "auth"], [])

    def test_valid_svg_creates_one_blob_and_one_row(self):
        response = self.upload(
            self.alice, self.project["id"], tags=["ui", "arrows, ui"], description="Right arrow"
        )

        self.assertEqual(response.status_code, 201, response.text)
        self.assertEqual(self.db.ops_for("storage:svg-files"), ["upload"])
        self.assertEqual(len(self.db.buckets["svg-files"]), 1)
        rows = self.db.rows("svgs")
        self.assertEqual(len(rows), 1)
        row = rows[0]
        path = next(iter(self.db.buckets["svg-files"]))
        self.assertEqual(row["file_path"], path)
        self.assertTrue(path.startswith(f"{self.user_id('alice@example.com')}/"))
        self.assertTrue(path.endswith(".svg"))
        self.assertEqual(row["name"], "arrow.svg")
        self.assertEqual(row["file_size"], len(ARROW_SVG))
        self.assertEqual(row["tags"], ["ui", "arrows"])
        self.assertEqual(row["description"], "Right arrow")

    def test_multiple_files_upload_and_non_svgs_are_reported(self):
        response = self.upload(self.alice, self.project["id"], files=[
            ("a.svg", ARROW_SVG, "image/svg+xml"),
            ("b.svg", ARROW_SVG, "image/svg+xml"),
            ("c.png", PNG_BYTES, "image/png"),
        ])

        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(sorted(s["name"] for s in body["uploaded"]), ["a.svg", "b.svg"])
        self.assertEqual(body["failed"], [{"filename": "c.png", "error": "Not an SVG file"}])
        self.assertEqual(len(set(self.db.buckets["svg-files"])), 2)

    def test_oversized_file_is_rejected_individually(self):
        with mock.patch.object(settings, "max_svg_size_bytes", 100):
            response = self.upload(self.alice, self.project["id"], files=[
                ("big.svg", ARROW_SVG, "image/svg+xml"),
                ("tiny.svg", b"<svg xmlns='http://www.w3.org/2000/svg'/>", "image/svg+xml"),
            ])

        self.assertEqual(response.status_code, 201)
        self.assertEqual([s["name"] for s in response.json()["uploaded"]], ["tiny.svg"])
        self.assertEqual(response.json()["failed"][0]["filename"], "big.svg")

    def test_single_oversized_file_is_a_client_error(self):
        with mock.patch.object(settings, "max_svg_size_bytes", 100):
            response = self.upload(self.alice, self.project["id"], files=[("big.svg", ARROW_SVG, "image/svg+xml")])

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"]["failed"][0]["filename"], "big.svg")
        self.assertEqual(self.db.ops_for("storage:svg-files"), [])
        self.assertEqual(self.db.rows("svgs"), [])

    def test_failed_insert_removes_blob_and_reports_file(self):
        self.db.fail("svgs", "insert")

        response = self.upload(self.alice, self.project["id"])

        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.json()["detail"]["failed"][0]["filename"], "arrow.svg")
        self.assertEqual(self.db.buckets["svg-files"], {})
        self.assertIn("remove", self.db.ops_for("storage:svg-files"))

    def test_upload_into_foreign_project_is_forbidden(self):
        bob = self.sign_in("bob@example.com")

        response = self.upload(bob, self.project["id"])

        self.assertEqual(response.status_code, 403)
        self.assertEqual(self.db.rows("svgs"), [])

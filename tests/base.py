import unittest

from fastapi.testclient import TestClient

from app.main import app
from app.core.query_cache import query_cache
from app.core.rate_limit import limiter
from app.database.supabase_client import get_supabase, get_auth_client, get_admin_client
from app.modules.auth.service import _AUTH_USER_CACHE
from tests.fakes import FakeSupabase

ARROW_SVG = (
    b'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24">'
    + b'<path d="M5 12h14M12 5l7 7-7 7" stroke="currentColor"/>' * 36
    + b"</svg>"
)
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


class ApiTestCase(unittest.TestCase):
    """TestClient against the real app with every Supabase client replaced by one FakeSupabase."""

    def setUp(self):
        self.db = FakeSupabase()
        self.admin_client = self.db
        query_cache.clear()
        _AUTH_USER_CACHE.clear()
        limiter.enabled = False
        self.addCleanup(setattr, limiter, "enabled", True)

        app.dependency_overrides[get_supabase] = lambda: self.db
        app.dependency_overrides[get_auth_client] = lambda: self.db
        app.dependency_overrides[get_admin_client] = lambda: self.admin_client
        self.addCleanup(app.dependency_overrides.clear)
        self.client = TestClient(app)

    def sign_in(self, email="alice@example.com"):
        _, token = self.db.auth.sign_in(email)
        return {"Authorization": f"Bearer {token}"}

    def user_id(self, email):
        return self.db.auth.users[email].id

    def create_project(self, headers, name="Icons", **fields):
        response = self.client.post("/api/v1/projects", json={"name": name, **fields}, headers=headers)
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()

    def upload(self, headers, project_id, files=None, **form):
        files = files or [("arrow.svg", ARROW_SVG, "image/svg+xml")]
        return self.client.post(
            "/api/v1/upload",
            files=[("files", f) for f in files],
            data={"project_id": project_id, **form},
            headers=headers,
        )

    def upload_one(self, headers, project_id, name="arrow.svg", content=ARROW_SVG, **form):
        response = self.upload(headers, project_id, files=[(name, content, "image/svg+xml")], **form)
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()["uploaded"][0]

from tests.base import ApiTestCase, ARROW_SVG
from tests.fakes import OTP_CODE


class SignInToProjectViewTests(ApiTestCase):
    def test_alice_signs_in_creates_project_uploads_and_sees_it(self):
        self.assertEqual(
            self.client.post("/api/v1/auth/otp", json={"email": "alice@example.com"}).status_code, 200
        )
        session = self.client.post(
            "/api/v1/auth/verify", json={"email": "alice@example.com", "code": OTP_CODE}
        ).json()
        headers = {"Authorization": f"Bearer {session['access_token']}"}

        dashboard = self.client.get("/api/v1/dashboard", headers=headers).json()
        self.assertEqual(dashboard["projects"], [])
        self.assertEqual(self.client.get("/api/v1/projects", headers=headers).json(), [])

        project = self.create_project(headers, "Icons", is_public=False)
        content = ARROW_SVG.ljust(2048)
        upload = self.upload(headers, project["id"], files=[("arrow.svg", content, "image/svg+xml")])
        self.assertEqual(upload.status_code, 201, upload.text)

        view = self.client.get(f"/api/v1/projects/{project['id']}/svgs", headers=headers)

        self.assertEqual(view.status_code, 200)
        svgs = view.json()["svgs"]
        self.assertEqual(len(svgs), 1)
        self.assertEqual(svgs[0]["name"], "arrow.svg")
        self.assertEqual((svgs[0]["views"], svgs[0]["downloads"]), (0, 0))
        self.assertEqual(svgs[0]["file_size"], 2048)

        navigation = self.client.get("/api/v1/navigation", headers=headers).json()
        self.assertEqual(navigation["projects"][0]["count"], 1)
        self.assertEqual(navigation["email"], "alice@example.com")

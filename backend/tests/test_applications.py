from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from talenthub.config import settings
from talenthub.main import app
from talenthub.services import application_service


def _uploads(tmp_data):
    uploads = tmp_data / "uploads"
    return sorted(p.name for p in uploads.iterdir()) if uploads.exists() else []


class TestSubmitApplication:
    def test_submit_application(self, client, employer, applicant, create_job, submit_application, tmp_data):
        _, employer_headers = employer
        user, headers = applicant
        job = create_job(employer_headers)

        r = submit_application(
            headers, job["id"],
            cover_letter="I would love to join.",
            phone="+1555000111",
            linkedin="https://linkedin.com/in/jane",
        )
        assert r.status_code == 201, r.json()
        data = r.json()
        assert data["status"] == "APPLIED"
        assert data["job_id"] == job["id"]
        assert data["applicant_id"] == user["id"]
        assert data["cover_letter"] == "I would love to join."
        assert data["resume_path"].startswith("resume-")
        assert data["resume_path"].endswith(".pdf")
        assert data["cover_letter_path"] is None
        assert data["job"]["title"] == job["title"]
        assert data["resume_path"] in _uploads(tmp_data)

        profile = client.get("/api/users/profile", headers=headers).json()
        assert profile["phone"] == "+1555000111"
        assert profile["linkedin"] == "https://linkedin.com/in/jane"

    def test_blank_backfill_does_not_clear_profile(self, client, employer, register, create_job, submit_application):
        _, employer_headers = employer
        _, headers = register("sam@example.com", phone="+1999")
        job = create_job(employer_headers)

        r = submit_application(headers, job["id"], phone="")
        assert r.status_code == 201
        assert client.get("/api/users/profile", headers=headers).json()["phone"] == "+1999"

    def test_with_cover_letter_file(self, client, employer, applicant, create_job, submit_application, tmp_data):
        _, employer_headers = employer
        _, headers = applicant
        job = create_job(employer_headers)

        r = submit_application(
            headers, job["id"],
            cover_letter_file=("letter.docx", b"PK docx bytes", "application/octet-stream"),
        )
        assert r.status_code == 201
        path = r.json()["cover_letter_path"]
        assert path.startswith("coverLetterFile-")
        assert path.endswith(".docx")
        assert path in _uploads(tmp_data)

    def test_resume_required(self, client, employer, applicant, create_job, submit_application):
        _, employer_headers = employer
        _, headers = applicant
        job = create_job(employer_headers)

        r = submit_application(headers, job["id"], resume=None, cover_letter="No file")
        assert r.status_code == 400
        assert r.json()["error"] == "Resume is required"

    def test_rejects_unsupported_file_type(self, client, employer, applicant, create_job, submit_application, tmp_data):
        _, employer_headers = employer
        _, headers = applicant
        job = create_job(employer_headers)

        r = submit_application(headers, job["id"], resume=("resume.txt", b"plain text", "text/plain"))
        assert r.status_code == 400
        assert "Invalid file type" in r.json()["error"]
        assert _uploads(tmp_data) == []

    def test_rejects_oversized_file(self, client, employer, applicant, create_job, submit_application, monkeypatch):
        _, employer_headers = employer
        _, headers = applicant
        job = create_job(employer_headers)
        monkeypatch.setattr(settings, "max_upload_bytes", 10)

        r = submit_application(headers, job["id"], resume=("resume.pdf", b"x" * 11, "application/pdf"))
        assert r.status_code == 400
        assert "too large" in r.json()["error"]

    def test_duplicate_application(self, client, employer, applicant, create_job, submit_application):
        _, employer_headers = employer
        _, headers = applicant
        job = create_job(employer_headers)

        assert submit_application(headers, job["id"]).status_code == 201
        r = submit_application(headers, job["id"])
        assert r.status_code == 409
        assert r.json()["error"] == "You have already applied for this job"

    def test_concurrent_duplicate_hits_unique_constraint(
        self, client, employer, applicant, create_job, submit_application, tmp_data, monkeypatch
    ):
        _, employer_headers = employer
        _, headers = applicant
        job = create_job(employer_headers)
        assert submit_application(headers, job["id"]).status_code == 201
        stored_before = _uploads(tmp_data)

        # Simulate a second request that passed the pre-check before the first committed.
        monkeypatch.setattr(application_service, "_find_existing", lambda db, job_id, applicant_id: None)
        r = submit_application(headers, job["id"])
        assert r.status_code == 409
        assert r.json()["error"] == "You have already applied for this job"
        assert _uploads(tmp_data) == stored_before

    def test_inactive_job_not_accepting(self, client, employer, applicant, create_job, submit_application):
        _, employer_headers = employer
        _, headers = applicant
        job = create_job(employer_headers)
        client.put(f"/api/jobs/{job['id']}", json={"status": "INACTIVE"}, headers=employer_headers)

        r = submit_application(headers, job["id"])
        assert r.status_code == 400
        assert r.json()["error"] == "This job is not accepting applications"

    def test_missing_job(self, client, applicant, submit_application):
        _, headers = applicant
        r = submit_application(headers, 999)
        assert r.status_code == 404

    def test_employer_cannot_apply(self, client, employer, create_job, submit_application):
        _, headers = employer
        job = create_job(headers)
        r = submit_application(headers, job["id"])
        assert r.status_code == 403

    def test_requires_auth(self, client, employer, create_job, submit_application):
        _, headers = employer
        job = create_job(headers)
        r = submit_application({}, job["id"])
        assert r.status_code == 401

    def test_employer_oversized_resume_is_forbidden(self, client, employer, create_job, submit_application, monkeypatch):
        _, headers = employer
        job = create_job(headers)
        monkeypatch.setattr(settings, "max_upload_bytes", 10)

        r = submit_application(headers, job["id"], resume=("resume.pdf", b"x" * 100, "application/pdf"))
        assert r.status_code == 403
        assert r.json()["error"] == "Applicant access required"

    def test_failed_commit_removes_stored_files(
        self, client, employer, applicant, create_job, tmp_data, monkeypatch
    ):
        _, employer_headers = employer
        _, headers = applicant
        job = create_job(employer_headers)

        def failing_commit(self):
            raise RuntimeError("disk I/O error")

        monkeypatch.setattr(Session, "commit", failing_commit)
        quiet_client = TestClient(app, raise_server_exceptions=False)
        r = quiet_client.post(
            "/api/applications",
            data={"job_id": str(job["id"])},
            files={"resume": ("resume.pdf", b"%PDF-1.4 resume", "application/pdf")},
            headers=headers,
        )
        assert r.status_code == 500
        assert r.json()["error"] == "Something went wrong!"
        assert _uploads(tmp_data) == []


class TestListApplications:
    def test_my_applications(self, client, employer, applicant, register, create_job, submit_application):
        _, employer_headers = employer
        _, headers = applicant
        _, other_headers = register("other@example.com")
        first = create_job(employer_headers, title="First")
        second = create_job(employer_headers, title="Second")
        submit_application(headers, first["id"])
        submit_application(headers, second["id"])
        submit_application(other_headers, first["id"])

        data = client.get("/api/applications/my-applications", headers=headers).json()
        assert data["pagination"]["total"] == 2
        assert {a["job"]["title"] for a in data["applications"]} == {"First", "Second"}

    def test_my_applications_employer_forbidden(self, client, employer):
        _, headers = employer
        r = client.get("/api/applications/my-applications", headers=headers)
        assert r.status_code == 403

    def test_job_applications_for_owner(self, client, employer, applicant, create_job, submit_application):
        _, employer_headers = employer
        user, headers = applicant
        job = create_job(employer_headers)
        submit_application(headers, job["id"])

        r = client.get(f"/api/applications/job/{job['id']}", headers=employer_headers)
        assert r.status_code == 200
        data = r.json()
        assert data["pagination"]["total"] == 1
        assert data["applications"][0]["applicant"]["email"] == user["email"]

    def test_job_applications_other_employer_forbidden(self, client, employer, register, create_job):
        _, employer_headers = employer
        _, other_headers = register("rival@othercorp.com", role="employer")
        job = create_job(employer_headers)

        r = client.get(f"/api/applications/job/{job['id']}", headers=other_headers)
        assert r.status_code == 403

    def test_job_applications_missing_job(self, client, employer):
        _, headers = employer
        r = client.get("/api/applications/job/999", headers=headers)
        assert r.status_code == 404

    def test_job_applications_status_filter(self, client, employer, applicant, register, create_job, submit_application):
        _, employer_headers = employer
        _, headers = applicant
        _, other_headers = register("other@example.com")
        job = create_job(employer_headers)
        app = submit_application(headers, job["id"]).json()
        submit_application(other_headers, job["id"])
        client.patch(f"/api/applications/{app['id']}/status", json={"status": "SHORTLISTED"}, headers=employer_headers)

        data = client.get(f"/api/applications/job/{job['id']}?status=shortlisted", headers=employer_headers).json()
        assert [a["id"] for a in data["applications"]] == [app["id"]]


class TestApplicationStatus:
    def _setup(self, employer, applicant, create_job, submit_application):
        _, employer_headers = employer
        _, headers = applicant
        job = create_job(employer_headers)
        app = submit_application(headers, job["id"]).json()
        return app, employer_headers, headers

    def test_owner_updates_status(self, client, employer, applicant, create_job, submit_application):
        app, employer_headers, _ = self._setup(employer, applicant, create_job, submit_application)

        r = client.patch(f"/api/applications/{app['id']}/status", json={"status": "shortlisted"}, headers=employer_headers)
        assert r.status_code == 200
        assert r.json()["status"] == "SHORTLISTED"

        # Same value twice is fine, and terminal-looking states can move again.
        for status in ("SHORTLISTED", "HIRED", "APPLIED"):
            r = client.patch(f"/api/applications/{app['id']}/status", json={"status": status}, headers=employer_headers)
            assert r.status_code == 200
            assert r.json()["status"] == status

    def test_invalid_status(self, client, employer, applicant, create_job, submit_application):
        app, employer_headers, _ = self._setup(employer, applicant, create_job, submit_application)

        r = client.patch(f"/api/applications/{app['id']}/status", json={"status": "ARCHIVED"}, headers=employer_headers)
        assert r.status_code == 400
        assert r.json()["valid_statuses"] == ["APPLIED", "SHORTLISTED", "REJECTED", "HIRED"]

        r = client.patch(f"/api/applications/{app['id']}/status", json={"status": "REVIEWED"}, headers=employer_headers)
        assert r.status_code == 400

    def test_status_required(self, client, employer, applicant, create_job, submit_application):
        app, employer_headers, _ = self._setup(employer, applicant, create_job, submit_application)
        r = client.patch(f"/api/applications/{app['id']}/status", json={}, headers=employer_headers)
        assert r.status_code == 400
        assert r.json()["error"] == "Status is required"

    def test_applicant_cannot_update(self, client, employer, applicant, create_job, submit_application):
        app, _, headers = self._setup(employer, applicant, create_job, submit_application)
        r = client.patch(f"/api/applications/{app['id']}/status", json={"status": "HIRED"}, headers=headers)
        assert r.status_code == 403

    def test_other_employer_cannot_update(self, client, employer, applicant, register, create_job, submit_application):
        app, _, _ = self._setup(employer, applicant, create_job, submit_application)
        _, other_headers = register("rival@othercorp.com", role="employer")
        r = client.patch(f"/api/applications/{app['id']}/status", json={"status": "HIRED"}, headers=other_headers)
        assert r.status_code == 403

    def test_admin_can_update(self, client, employer, applicant, admin, create_job, submit_application):
        app, _, _ = self._setup(employer, applicant, create_job, submit_application)
        _, admin_headers = admin
        r = client.patch(f"/api/applications/{app['id']}/status", json={"status": "REJECTED"}, headers=admin_headers)
        assert r.status_code == 200
        assert r.json()["status"] == "REJECTED"

    def test_missing_application(self, client, employer):
        _, headers = employer
        r = client.patch("/api/applications/999/status", json={"status": "HIRED"}, headers=headers)
        assert r.status_code == 404
        assert r.json()["error"] == "Application not found"


class TestGetApplication:
    def test_visibility(self, client, employer, applicant, admin, register, create_job, submit_application):
        _, employer_headers = employer
        _, headers = applicant
        _, admin_headers = admin
        _, stranger_headers = register("stranger@example.com")
        _, rival_headers = register("rival@othercorp.com", role="employer")
        job = create_job(employer_headers)
        app = submit_application(headers, job["id"]).json()

        url = f"/api/applications/{app['id']}"
        assert client.get(url, headers=headers).status_code == 200
        assert client.get(url, headers=employer_headers).status_code == 200
        assert client.get(url, headers=admin_headers).status_code == 200
        assert client.get(url, headers=stranger_headers).status_code == 403
        assert client.get(url, headers=rival_headers).status_code == 403

    def test_check_endpoint(self, client, employer, applicant, create_job, submit_application):
        _, employer_headers = employer
        _, headers = applicant
        job = create_job(employer_headers)

        data = client.get(f"/api/applications/check/{job['id']}", headers=headers).json()
        assert data == {"has_applied": False, "application": None}

        app = submit_application(headers, job["id"]).json()
        data = client.get(f"/api/applications/check/{job['id']}", headers=headers).json()
        assert data["has_applied"] is True
        assert data["application"]["id"] == app["id"]
        assert data["application"]["status"] == "APPLIED"

    def test_check_requires_applicant(self, client, employer, create_job):
        _, headers = employer
        job = create_job(headers)
        r = client.get(f"/api/applications/check/{job['id']}", headers=headers)
        assert r.status_code == 403


class TestUploads:
    def test_stored_resume_is_served(self, client, employer, applicant, create_job, submit_application):
        _, employer_headers = employer
        _, headers = applicant
        job = create_job(employer_headers)
        app = submit_application(headers, job["id"], resume=("cv.pdf", b"%PDF-1.4 my cv", "application/pdf")).json()

        r = client.get(f"/uploads/{app['resume_path']}")
        assert r.status_code == 200
        assert r.content == b"%PDF-1.4 my cv"
        assert r.headers["content-type"] == "application/pdf"

    def test_missing_upload(self, client):
        r = client.get("/uploads/resume-doesnotexist.pdf")
        assert r.status_code == 404
        assert r.json()["error"] == "File not found"

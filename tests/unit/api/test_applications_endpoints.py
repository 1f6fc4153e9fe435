"""
Tests for application workflow endpoints.
Covers one-click apply, idempotency, required questions and owner-only
status changes.
"""

import pytest

APPLICATIONS_URL = "/api/v1/applications"


@pytest.fixture
def job_with_questions(create_job):
    return create_job(
        supplementalQuestions=[
            {"id": "q1", "question": "Years of Python?", "required": True},
            {"id": "q2", "question": "Anything else?"},
        ],
    )


@pytest.fixture
def apply(client, candidate_headers):
    """Factory: submit an application as the default candidate."""

    def _apply(job_id, headers=None, **extra):
        return client.post(
            APPLICATIONS_URL,
            json={"job_id": job_id, **extra},
            headers=headers or candidate_headers,
        )

    return _apply


# ==================== Apply Tests ==================== #

class TestApply:
    def test_backend_engineer_scenario(
        self, client, create_job, apply, recruiter_headers, candidate_headers
    ):
        """Recruiter posts, candidate applies, recruiter moves them to interview."""
        client.put(
            "/api/v1/profile",
            json={"name": "Jane Doe", "email": "jane@example.com", "phone": "555-123-4567"},
            headers=candidate_headers,
        )
        job = create_job(title="Backend Engineer", company="Acme", location="Remote")

        response = apply(job["id"])

        assert response.status_code == 201
        body = response.json()
        assert body["created"] is True
        assert body["application"]["status"] == "applied"
        assert body["application"]["status_label"] == "Applied"
        assert body["application"]["candidate_id"] == "candidate-1"

        listed = client.get(f"/api/v1/jobs/{job['id']}/applications", headers=recruiter_headers)
        assert listed.status_code == 200
        assert [a["id"] for a in listed.json()] == [body["application"]["id"]]

        patched = client.patch(
            f"{APPLICATIONS_URL}/{body['application']['id']}",
            json={"status": "Interview"},
            headers=recruiter_headers,
        )
        assert patched.status_code == 200

        listed = client.get(f"/api/v1/jobs/{job['id']}/applications", headers=recruiter_headers)
        [application] = listed.json()
        assert application["status"] == "interview"
        assert application["status_label"] == "Interview"
        assert application["candidate"]["name"] == "Jane Doe"
        assert application["candidate"]["email"] == "jane@example.com"

    def test_second_apply_returns_existing(self, create_job, apply):
        job = create_job()

        first = apply(job["id"], cover_letter="Hello")
        second = apply(job["id"], cover_letter="Different")

        assert first.status_code == 201
        assert second.status_code == 200
        assert second.json()["created"] is False
        assert second.json()["application"]["id"] == first.json()["application"]["id"]
        assert second.json()["application"]["cover_letter"] == "Hello"

    def test_second_apply_after_close_still_returns_existing(
        self, client, create_job, apply, recruiter_headers
    ):
        job = create_job()
        first = apply(job["id"])
        client.patch(f"/api/v1/jobs/{job['id']}", json={"status": "closed"}, headers=recruiter_headers)

        second = apply(job["id"])

        assert second.status_code == 200
        assert second.json()["application"]["id"] == first.json()["application"]["id"]

    def test_missing_job(self, apply):
        response = apply("no-such-job")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    @pytest.mark.parametrize("job_status", ["draft", "closed"])
    def test_job_not_open(self, create_job, apply, job_status):
        job = create_job(status=job_status)

        assert apply(job["id"]).status_code == 404

    def test_requires_session(self, client, create_job):
        job = create_job()

        response = client.post(APPLICATIONS_URL, json={"job_id": job["id"]})

        assert response.status_code == 401

    def test_required_answers_missing(
        self, client, job_with_questions, apply, recruiter_headers, candidate_headers
    ):
        response = apply(job_with_questions["id"], supplemental_answers={"q2": "hi"})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"] == {"missing_required_questions": ["q1"]}

        # nothing was stored
        listed = client.get(
            f"/api/v1/jobs/{job_with_questions['id']}/applications", headers=recruiter_headers
        )
        assert listed.json() == []
        assert client.get(APPLICATIONS_URL, headers=candidate_headers).json() == []

    def test_blank_required_answer_counts_as_missing(self, job_with_questions, apply):
        response = apply(job_with_questions["id"], supplemental_answers={"q1": "   "})
        assert response.status_code == 400

    def test_required_answers_as_pairs(self, job_with_questions, apply):
        response = apply(
            job_with_questions["id"],
            supplementalAnswers=[{"questionId": "q1", "answer": "6"}],
        )

        assert response.status_code == 201
        assert response.json()["application"]["supplemental_answers"] == {"q1": "6"}

    def test_resume_defaults_to_profile(self, client, create_job, apply, candidate_headers):
        client.put(
            "/api/v1/profile",
            json={
                "name": "Jane Doe",
                "email": "jane@example.com",
                "resume_url": "https://files.example.com/jane.pdf",
            },
            headers=candidate_headers,
        )
        job = create_job()

        response = apply(job["id"])

        assert response.json()["application"]["resume_url"] == "https://files.example.com/jane.pdf"

    def test_explicit_resume_wins(self, create_job, apply):
        job = create_job()

        response = apply(job["id"], resume_url="https://cdn.example.com/cv.pdf")

        assert response.json()["application"]["resume_url"] == "https://cdn.example.com/cv.pdf"


# ==================== Status Tests ==================== #

class TestUpdateStatus:
    @pytest.fixture
    def application(self, create_job, apply):
        job = create_job()
        return apply(job["id"]).json()["application"]

    def _stored_status(self, client, application, headers):
        response = client.get(f"{APPLICATIONS_URL}/{application['id']}", headers=headers)
        assert response.status_code == 200
        return response.json()["application"]["status"]

    @pytest.mark.parametrize("value,canonical", [
        ("applied", "applied"),
        ("Under Review", "under_review"),
        ("interview", "interview"),
        ("Offer", "offer"),
        ("hired", "hired"),
        ("rejected", "rejected"),
    ])
    def test_owner_sets_each_status(self, client, application, recruiter_headers, value, canonical):
        response = client.patch(
            f"{APPLICATIONS_URL}/{application['id']}",
            json={"status": value},
            headers=recruiter_headers,
        )

        assert response.status_code == 200
        assert response.json()["status"] == canonical
        assert self._stored_status(client, application, recruiter_headers) == canonical

    def test_any_transition_allowed(self, client, application, recruiter_headers):
        url = f"{APPLICATIONS_URL}/{application['id']}"

        for value in ("hired", "applied", "rejected", "interview"):
            response = client.patch(url, json={"status": value}, headers=recruiter_headers)
            assert response.status_code == 200

        assert response.json()["status_label"] == "Interview"

    def test_other_recruiter_forbidden(
        self, client, application, other_recruiter_headers, recruiter_headers
    ):
        response = client.patch(
            f"{APPLICATIONS_URL}/{application['id']}",
            json={"status": "interview"},
            headers=other_recruiter_headers,
        )

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN"
        assert self._stored_status(client, application, recruiter_headers) == "applied"

    def test_candidate_forbidden(self, client, application, candidate_headers):
        response = client.patch(
            f"{APPLICATIONS_URL}/{application['id']}",
            json={"status": "hired"},
            headers=candidate_headers,
        )

        assert response.status_code == 403
        assert self._stored_status(client, application, candidate_headers) == "applied"

    def test_forbidden_checked_before_value(self, client, application, other_recruiter_headers):
        response = client.patch(
            f"{APPLICATIONS_URL}/{application['id']}",
            json={"status": "bogus"},
            headers=other_recruiter_headers,
        )

        assert response.status_code == 403

    def test_invalid_status(self, client, application, recruiter_headers):
        response = client.patch(
            f"{APPLICATIONS_URL}/{application['id']}",
            json={"status": "bogus"},
            headers=recruiter_headers,
        )

        assert response.status_code == 400
        assert "Under Review" in response.json()["error"]["details"]["allowed"]

    def test_missing_application(self, client, recruiter_headers):
        response = client.patch(
            f"{APPLICATIONS_URL}/nope", json={"status": "hired"}, headers=recruiter_headers
        )
        assert response.status_code == 404

    def test_unauthenticated_first(self, client):
        response = client.patch(f"{APPLICATIONS_URL}/nope", json={"status": "hired"})
        assert response.status_code == 401


# ==================== Read Tests ==================== #

class TestReadApplications:
    def test_my_applications_newest_first(self, client, create_job, apply, candidate_headers):
        first = create_job(title="First")
        second = create_job(title="Second")
        apply(first["id"])
        apply(second["id"])

        response = client.get(APPLICATIONS_URL, headers=candidate_headers)

        assert response.status_code == 200
        assert [a["job"]["title"] for a in response.json()] == ["Second", "First"]

    def test_my_applications_only_mine(self, client, create_job, apply, auth_headers):
        job = create_job()
        apply(job["id"])

        response = client.get(APPLICATIONS_URL, headers=auth_headers("candidate-2"))

        assert response.json() == []

    def test_job_applications_include_candidate_snapshot(
        self, client, create_job, apply, candidate_headers, recruiter_headers
    ):
        client.put(
            "/api/v1/profile",
            json={"name": "Jane Doe", "email": "jane@example.com", "phone": "555-123-4567"},
            headers=candidate_headers,
        )
        job = create_job()
        apply(job["id"])

        response = client.get(f"/api/v1/jobs/{job['id']}/applications", headers=recruiter_headers)

        candidate = response.json()[0]["candidate"]
        assert candidate["name"] == "Jane Doe"
        assert candidate["phone"] == "555-123-4567"

    def test_job_applications_without_profile(self, client, create_job, apply, recruiter_headers):
        job = create_job()
        apply(job["id"])

        response = client.get(f"/api/v1/jobs/{job['id']}/applications", headers=recruiter_headers)

        assert response.json()[0]["candidate"] is None

    def test_job_applications_owner_only(self, client, create_job, other_recruiter_headers):
        job = create_job()

        response = client.get(
            f"/api/v1/jobs/{job['id']}/applications", headers=other_recruiter_headers
        )

        assert response.status_code == 403

    def test_detail_visible_to_candidate_and_owner(
        self, client, create_job, apply, candidate_headers, recruiter_headers, other_recruiter_headers
    ):
        client.put(
            "/api/v1/profile",
            json={
                "name": "jane DOE",
                "email": "jane@example.com",
                "phone": "5551234567",
                "skills": ["Python", "python", "SQL"],
                "github_url": "https://github.com/jane",
            },
            headers=candidate_headers,
        )
        job = create_job()
        application = apply(job["id"]).json()["application"]
        url = f"{APPLICATIONS_URL}/{application['id']}"

        as_owner = client.get(url, headers=recruiter_headers)
        as_candidate = client.get(url, headers=candidate_headers)
        as_stranger = client.get(url, headers=other_recruiter_headers)

        assert as_owner.status_code == 200
        assert as_candidate.status_code == 200
        assert as_stranger.status_code == 403

        detail = as_owner.json()
        assert detail["job"]["title"] == "Backend Engineer"
        assert detail["candidate"]["skills"] == ["Python", "python", "SQL"]
        normalized = detail["candidate"]["normalized"]
        assert normalized["name"] == "Jane Doe"
        assert normalized["phone"] == "(555) 123-4567"
        assert normalized["skills"] == ["python", "sql"]

"""
Tests for job catalog endpoints.
Covers deadline filtering, sorting, ownership and the recruiter views.
"""

import pytest

JOBS_URL = "/api/v1/jobs"


def _titles(response) -> list[str]:
    assert response.status_code == 200, response.text
    return [job["title"] for job in response.json()]


# ==================== Create / Read Tests ==================== #

class TestCreateJob:
    def test_create_defaults_to_open(self, client, recruiter_headers, job_payload):
        response = client.post(JOBS_URL, json=job_payload, headers=recruiter_headers)

        assert response.status_code == 201
        job = response.json()
        assert job["status"] == "open"
        assert job["employer_id"] == "recruiter-1"
        assert job["urgency"] == "none"
        assert job["deadline_text"] == "No deadline"

    def test_requires_session(self, client, job_payload):
        response = client.post(JOBS_URL, json=job_payload)

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHENTICATED"

    def test_invalid_token(self, client, job_payload):
        response = client.post(JOBS_URL, json=job_payload, headers={"Authorization": "Bearer bad"})

        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Invalid session token."

    def test_missing_title(self, client, recruiter_headers, job_payload):
        del job_payload["title"]

        response = client.post(JOBS_URL, json=job_payload, headers=recruiter_headers)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_supplemental_questions_stored_in_requirements(self, client, create_job):
        job = create_job(
            requirements={"years": 3},
            supplementalQuestions=[
                {"id": "q1", "question": "Why us?", "required": True},
                {"question": "Portfolio?", "type": "textarea"},
            ],
        )

        assert job["requirements"]["years"] == 3
        assert [q["id"] for q in job["supplemental_questions"]][0] == "q1"
        assert len(job["supplemental_questions"]) == 2
        assert job["supplemental_questions"][1]["id"]
        assert job["requirements"]["supplementalQuestions"] == job["supplemental_questions"]

    def test_get_job(self, client, create_job):
        job = create_job()

        response = client.get(f"{JOBS_URL}/{job['id']}")

        assert response.status_code == 200
        assert response.json()["title"] == "Backend Engineer"

    def test_get_missing_job(self, client):
        response = client.get(f"{JOBS_URL}/does-not-exist")

        assert response.status_code == 404
        assert response.json()["error"]["path"] == f"{JOBS_URL}/does-not-exist"


# ==================== Listing Tests ==================== #

class TestListJobs:
    """Deadline windows and sort orders."""

    @pytest.fixture
    def catalog(self, create_job, deadline_in):
        create_job(title="Expired", deadline=deadline_in(-1))
        create_job(title="Urgent", deadline=deadline_in(2))
        create_job(title="This Week", deadline=deadline_in(5))
        create_job(title="This Month", deadline=deadline_in(20))
        create_job(title="Later", deadline=deadline_in(60))
        create_job(title="Open Ended")
        create_job(title="Drafted", status="draft", deadline=deadline_in(1))

    def test_all_hides_expired_and_non_open(self, client, catalog):
        titles = _titles(client.get(JOBS_URL))

        assert titles == ["Urgent", "This Week", "This Month", "Later", "Open Ended"]

    def test_show_expired(self, client, catalog):
        titles = _titles(client.get(JOBS_URL, params={"show_expired": "true"}))
        assert titles[0] == "Expired"

        camel = _titles(client.get(JOBS_URL, params={"showExpired": "true"}))
        assert camel == titles

    @pytest.mark.parametrize("deadline_filter,expected", [
        ("urgent", ["Urgent"]),
        ("week", ["Urgent", "This Week"]),
        ("month", ["Urgent", "This Week", "This Month"]),
        ("no_deadline", ["Open Ended"]),
    ])
    def test_filters(self, client, catalog, deadline_filter, expected):
        titles = _titles(client.get(JOBS_URL, params={"filter": deadline_filter}))
        assert titles == expected

    def test_urgent_job_not_in_no_deadline(self, client, create_job, deadline_in):
        create_job(title="Soon", deadline=deadline_in(2))

        assert "Soon" in _titles(client.get(JOBS_URL, params={"filter": "urgent"}))
        assert "Soon" not in _titles(client.get(JOBS_URL, params={"filter": "no_deadline"}))

    def test_deadline_desc_keeps_no_deadline_last(self, client, catalog):
        titles = _titles(client.get(JOBS_URL, params={"sort": "deadline_desc"}))
        assert titles == ["Later", "This Month", "This Week", "Urgent", "Open Ended"]

    def test_title_sort(self, client, create_job):
        create_job(title="zeta")
        create_job(title="Alpha")
        create_job(title="beta")

        assert _titles(client.get(JOBS_URL, params={"sort": "title_asc"})) == ["Alpha", "beta", "zeta"]

    def test_created_sort(self, client, create_job):
        create_job(title="First")
        create_job(title="Second")

        assert _titles(client.get(JOBS_URL, params={"sort": "created_desc"})) == ["Second", "First"]

    def test_unknown_filter_rejected(self, client):
        response = client.get(JOBS_URL, params={"filter": "someday"})
        assert response.status_code == 400

    def test_urgency_in_listing(self, client, create_job, deadline_in):
        create_job(title="Soon", deadline=deadline_in(2))

        job = client.get(JOBS_URL).json()[0]

        assert job["urgency"] == "urgent"
        assert job["deadline_text"] == "1 day left"


# ==================== Owner Tests ==================== #

class TestUpdateJob:
    def test_owner_can_close(self, client, create_job, recruiter_headers):
        job = create_job()

        response = client.patch(
            f"{JOBS_URL}/{job['id']}", json={"status": "closed"}, headers=recruiter_headers
        )

        assert response.status_code == 200
        assert response.json()["status"] == "closed"
        assert response.json()["title"] == "Backend Engineer"
        assert "Backend Engineer" not in _titles(client.get(JOBS_URL))

    def test_other_recruiter_forbidden(self, client, create_job, other_recruiter_headers):
        job = create_job()

        response = client.patch(
            f"{JOBS_URL}/{job['id']}", json={"title": "Hijacked"}, headers=other_recruiter_headers
        )

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN"

    def test_missing_job(self, client, recruiter_headers):
        response = client.patch(f"{JOBS_URL}/nope", json={"title": "X"}, headers=recruiter_headers)
        assert response.status_code == 404

    def test_clear_deadline(self, client, create_job, recruiter_headers, deadline_in):
        job = create_job(deadline=deadline_in(10))

        response = client.patch(
            f"{JOBS_URL}/{job['id']}", json={"deadline": None}, headers=recruiter_headers
        )

        assert response.json()["deadline"] is None

    def test_invalid_status(self, client, create_job, recruiter_headers):
        job = create_job()

        response = client.patch(
            f"{JOBS_URL}/{job['id']}", json={"status": "archived"}, headers=recruiter_headers
        )

        assert response.status_code == 400


class TestUpdateRequirements:
    """Requirements edits never drop the job's supplemental questions."""

    @pytest.fixture
    def job(self, create_job):
        return create_job(
            requirements={"level": "mid"},
            supplementalQuestions=[{"id": "q1", "question": "Years of Python?", "required": True}],
        )

    def _patch(self, client, job, body, headers):
        response = client.patch(f"{JOBS_URL}/{job['id']}", json=body, headers=headers)
        assert response.status_code == 200, response.text
        return response.json()

    def test_new_requirements_keep_questions(
        self, client, job, recruiter_headers, candidate_headers
    ):
        updated = self._patch(client, job, {"requirements": {"level": "senior"}}, recruiter_headers)

        assert updated["requirements"]["level"] == "senior"
        assert [q["id"] for q in updated["supplemental_questions"]] == ["q1"]

        response = client.post(
            "/api/v1/applications", json={"job_id": job["id"]}, headers=candidate_headers
        )
        assert response.status_code == 400
        assert response.json()["error"]["details"] == {"missing_required_questions": ["q1"]}

    def test_null_requirements_keep_questions(self, client, job, recruiter_headers):
        updated = self._patch(client, job, {"requirements": None}, recruiter_headers)

        assert updated["requirements"] == {"supplementalQuestions": updated["supplemental_questions"]}
        assert updated["supplemental_questions"][0]["required"] is True

    def test_replace_questions(self, client, job, recruiter_headers):
        updated = self._patch(
            client,
            job,
            {"supplementalQuestions": [{"id": "q2", "question": "Portfolio?"}]},
            recruiter_headers,
        )

        assert [q["id"] for q in updated["supplemental_questions"]] == ["q2"]
        assert updated["requirements"]["level"] == "mid"

    def test_clear_questions(self, client, job, recruiter_headers, candidate_headers):
        updated = self._patch(client, job, {"supplemental_questions": []}, recruiter_headers)

        assert updated["supplemental_questions"] == []
        assert updated["requirements"] == {"level": "mid"}
        response = client.post(
            "/api/v1/applications", json={"job_id": job["id"]}, headers=candidate_headers
        )
        assert response.status_code == 201

    def test_duplicate_question_ids_rejected(self, client, job, recruiter_headers):
        response = client.patch(
            f"{JOBS_URL}/{job['id']}",
            json={"supplemental_questions": [
                {"id": "q1", "question": "A?"},
                {"id": "q1", "question": "B?"},
            ]},
            headers=recruiter_headers,
        )

        assert response.status_code == 400


class TestMyJobs:
    def test_lists_only_my_jobs_with_counts(
        self, client, create_job, recruiter_headers, other_recruiter_headers, candidate_headers
    ):
        mine = create_job(title="Mine")
        create_job(title="Theirs", headers=other_recruiter_headers)
        client.post("/api/v1/applications", json={"job_id": mine["id"]}, headers=candidate_headers)

        response = client.get(f"{JOBS_URL}/mine", headers=recruiter_headers)

        assert response.status_code == 200
        jobs = response.json()
        assert [job["title"] for job in jobs] == ["Mine"]
        assert jobs[0]["application_count"] == 1

    def test_includes_drafts_and_closed(self, client, create_job, recruiter_headers):
        create_job(title="Draft", status="draft")
        create_job(title="Closed", status="closed")

        titles = [job["title"] for job in client.get(f"{JOBS_URL}/mine", headers=recruiter_headers).json()]

        assert sorted(titles) == ["Closed", "Draft"]

    def test_requires_session(self, client):
        assert client.get(f"{JOBS_URL}/mine").status_code == 401

"""Tests for audit logging."""

import json
import logging

from core.audit import AuditAction, ResourceType, log_audit_event, mask_pii


class TestPIIMasking:
    def test_masks_pii_fields(self):
        masked = mask_pii({"email": "jane@example.com", "job_id": "j1"})
        assert masked == {"email": "j***[16]", "job_id": "j1"}

    def test_empty_values(self):
        assert mask_pii({"phone": None}) == {"phone": "[MASKED]"}

    def test_lists_truncated(self):
        assert len(mask_pii(list(range(20)))) == 5


class TestAuditEvents:
    def test_event_logged_as_json(self, caplog):
        caplog.set_level(logging.INFO, logger="security.audit")

        event = log_audit_event(
            AuditAction.STATUS_CHANGE,
            ResourceType.APPLICATION,
            resource_id="app-1",
            user_id="recruiter-1",
            details={"from": "applied", "to": "interview"},
        )

        logged = json.loads(caplog.records[-1].getMessage())
        assert logged == event
        assert logged["action"] == "STATUS_CHANGE"
        assert logged["resource_type"] == "APPLICATION"
        assert logged["details"] == {"from": "applied", "to": "interview"}

    def test_pii_details_masked_on_request(self):
        event = log_audit_event(
            AuditAction.UPDATE,
            ResourceType.CANDIDATE_PROFILE,
            details={"name": "Jane"},
            contains_pii=True,
        )
        assert event["details"] == {"name": "J***[4]"}


class TestProfileAuditEvents:
    """Profile writes log contact details masked."""

    def _events(self, caplog):
        return [json.loads(r.getMessage()) for r in caplog.records if r.name == "security.audit"]

    def test_candidate_upsert_masks_contact_details(self, client, candidate_headers, caplog):
        caplog.set_level(logging.INFO, logger="security.audit")

        client.put(
            "/api/v1/profile",
            json={"name": "Jane Doe", "email": "jane@example.com"},
            headers=candidate_headers,
        )

        [event] = [e for e in self._events(caplog) if e["resource_type"] == "CANDIDATE_PROFILE"]
        assert event["contains_pii"] is True
        assert event["details"]["name"] == "J***[8]"
        assert event["details"]["email"] == "j***[16]"
        assert event["details"]["fields"] == ["email", "name"]

    def test_recruiter_create_masks_email(self, client, recruiter_headers, caplog):
        caplog.set_level(logging.INFO, logger="security.audit")

        client.post(
            "/api/v1/profile/recruiter",
            json={
                "name": "Rita Recruiter",
                "email": "rita@example.com",
                "company_name": "Acme",
                "job_title": "Talent Lead",
            },
            headers=recruiter_headers,
        )

        [event] = [e for e in self._events(caplog) if e["resource_type"] == "RECRUITER_PROFILE"]
        assert event["details"] == {"company_name": "Acme", "email": "r***[16]"}

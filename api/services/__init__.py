"""
API Services Layer.

Datastore operations behind the routes. Each function receives the
request's session explicitly and raises ``core.errors`` exceptions.
"""

from api.services.applications import (
    create_application,
    update_application_status,
    list_job_applications,
    get_application_detail,
    list_my_applications,
)

from api.services.jobs import (
    list_open_jobs,
    get_job,
    create_job,
    update_job,
    list_recruiter_jobs,
)

from api.services.candidates import (
    get_profile,
    upsert_profile,
    replace_resume,
    delete_resume,
)

from api.services.recruiters import (
    create_recruiter_profile,
    require_recruiter_profile,
    update_recruiter_profile,
    get_role,
)

__all__ = [
    # Applications
    "create_application",
    "update_application_status",
    "list_job_applications",
    "get_application_detail",
    "list_my_applications",
    # Jobs
    "list_open_jobs",
    "get_job",
    "create_job",
    "update_job",
    "list_recruiter_jobs",
    # Candidate profiles
    "get_profile",
    "upsert_profile",
    "replace_resume",
    "delete_resume",
    # Recruiter profiles
    "create_recruiter_profile",
    "require_recruiter_profile",
    "update_recruiter_profile",
    "get_role",
]

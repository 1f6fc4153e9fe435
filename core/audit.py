"""
Audit logging for state-changing marketplace operations.

Events are structured JSON lines on the ``security.audit`` logger; they are
not persisted as rows.
"""

import json
import logging
from enum import Enum
from typing import Any, Dict, Optional, Set

from core.utils.datetime import now

logger = logging.getLogger("security.audit")


class AuditAction(str, Enum):
    """Audit log action types."""
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    STATUS_CHANGE = "STATUS_CHANGE"
    UPLOAD = "UPLOAD"


class ResourceType(str, Enum):
    """Resource types for audit logging."""
    APPLICATION = "APPLICATION"
    JOB = "JOB"
    CANDIDATE_PROFILE = "CANDIDATE_PROFILE"
    RECRUITER_PROFILE = "RECRUITER_PROFILE"
    RESUME = "RESUME"


# PII fields that should be masked in logs
PII_FIELDS: Set[str] = {
    "email", "phone", "name", "full_name",
    "linkedin_url", "github_url", "portfolio_url",
    "cover_letter", "resume_url",
}


def mask_pii(data: Any, depth: int = 0) -> Any:
    """
    Recursively mask PII fields in data structures.

    Args:
        data: Data to mask (dict, list, or primitive)
        depth: Current recursion depth (max 10)

    Returns:
        Data with PII fields masked
    """
    if depth > 10:
        return "[MAX_DEPTH]"

    if isinstance(data, dict):
        masked = {}
        for key, value in data.items():
            if str(key).lower() in PII_FIELDS:
                if isinstance(value, str) and value:
                    # first char plus length
                    masked[key] = f"{value[0]}***[{len(value)}]"
                else:
                    masked[key] = "[MASKED]"
            else:
                masked[key] = mask_pii(value, depth + 1)
        return masked
    if isinstance(data, list):
        return [mask_pii(item, depth + 1) for item in data[:5]]
    return data


def log_audit_event(
    action: AuditAction,
    resource_type: ResourceType,
    resource_id: Optional[str] = None,
    user_id: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
    contains_pii: bool = False,
) -> Dict[str, Any]:
    """
    Emit an audit event and return it.

    Details are masked with :func:`mask_pii` when ``contains_pii`` is set.
    """
    event = {
        "timestamp": now().isoformat(),
        "event_type": "AUDIT",
        "action": action.value,
        "resource_type": resource_type.value,
        "resource_id": str(resource_id) if resource_id else None,
        "user_id": user_id,
        "contains_pii": contains_pii,
        "details": mask_pii(details) if details and contains_pii else details,
    }
    logger.info(json.dumps(event, default=str))
    return event

"""Resource ownership checks for mutating operations."""
from __future__ import annotations

import logging

from auth.errors import Forbidden

logger = logging.getLogger(__name__)


def authorize(subject_id, resource_owner_id) -> None:
    """Admit the action only if the authenticated subject owns the resource.

    Call after authentication and before applying any mutation. Ids are
    compared as strings so a UUID object and its string form are equal.
    """
    if subject_id is None or resource_owner_id is None or str(subject_id) != str(resource_owner_id):
        logger.info("ownership check failed: subject=%s owner=%s", subject_id, resource_owner_id)
        raise Forbidden()

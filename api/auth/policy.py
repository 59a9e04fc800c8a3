"""
Who may mutate what.

Pets and status events share one ownership rule: only the institution that
registered a pet may change it. Reads are public and never come through here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from core.errors import ForbiddenError

USER = "user"
INSTITUTION = "institution"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    id: str
    kind: str

    @property
    def is_institution(self) -> bool:
        return self.kind == INSTITUTION


def require_institution(principal: Principal) -> Principal:
    if not principal.is_institution:
        logger.warning("institution_required principal_id=%s kind=%s", principal.id, principal.kind)
        raise ForbiddenError("Only institutions can perform this action.")
    return principal


def authorize_ownership(principal: Principal, resource_owner_id: object) -> None:
    """
    Raise ForbiddenError unless `principal` is the institution owning the resource.
    """
    # asyncpg hands back UUID objects while token subjects are strings.
    if principal.is_institution and principal.id == str(resource_owner_id):
        return
    logger.warning(
        "ownership_denied principal_id=%s kind=%s owner_id=%s",
        principal.id,
        principal.kind,
        resource_owner_id,
    )
    raise ForbiddenError()

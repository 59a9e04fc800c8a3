"""Ownership gate shared by pet and status mutations."""

import uuid

import pytest

from auth.policy import INSTITUTION, USER, Principal, authorize_ownership, require_institution
from core.errors import ForbiddenError

OWNER_ID = "0b4d8f4e-2f67-4c55-9a3a-1f0e6f2b9c11"


def test_owner_institution_is_allowed():
    authorize_ownership(Principal(id=OWNER_ID, kind=INSTITUTION), OWNER_ID)


def test_owner_id_as_uuid_object_is_allowed():
    authorize_ownership(Principal(id=OWNER_ID, kind=INSTITUTION), uuid.UUID(OWNER_ID))


def test_other_institution_is_forbidden():
    with pytest.raises(ForbiddenError):
        authorize_ownership(Principal(id=str(uuid.uuid4()), kind=INSTITUTION), OWNER_ID)


def test_user_with_same_id_is_forbidden():
    with pytest.raises(ForbiddenError):
        authorize_ownership(Principal(id=OWNER_ID, kind=USER), OWNER_ID)


def test_require_institution():
    principal = Principal(id=OWNER_ID, kind=INSTITUTION)
    assert require_institution(principal) is principal
    with pytest.raises(ForbiddenError):
        require_institution(Principal(id=OWNER_ID, kind=USER))

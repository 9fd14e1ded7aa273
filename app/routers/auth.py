import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.core.errors import ProfileConflict, ValidationFailed, UpstreamFailure
from app.deps import get_admin_client, get_current_identity
from app.schemas.identity import Identity
from app.services.identity import AdminIdentityClient, IdentityProviderError

log = logging.getLogger("auth")
router = APIRouter(prefix="/api/auth", tags=["auth"])

ALLOWED_ROLES = ("teacher", "admin")

class CompleteProfileIn(BaseModel):
    role: Optional[Any] = None
    name: Optional[Any] = None
    schoolName: Optional[Any] = None
    gradeClass: Optional[Any] = None

def _clean(v: Any) -> str:
    return v.strip() if isinstance(v, str) else ""

@router.post("/complete-profile")
def complete_profile(
    payload: CompleteProfileIn,
    me: Identity = Depends(get_current_identity),
    admin: AdminIdentityClient = Depends(get_admin_client),
):
    # 역할은 한 번만 지정할 수 있다
    if me.user_metadata.role_set:
        raise ProfileConflict("Profile already completed")

    role = payload.role
    name = _clean(payload.name)
    school_name = _clean(payload.schoolName)
    if not role or not name or not school_name:
        raise ValidationFailed("role, name, and schoolName are required")
    if role not in ALLOWED_ROLES:
        raise ValidationFailed("role must be 'teacher' or 'admin'")

    try:
        admin.update_user_by_id(me.id, user_metadata={
            "role": role,
            "name": name,
            "schoolName": school_name,
            "gradeClass": _clean(payload.gradeClass),
        })
    except IdentityProviderError as e:
        log.error("complete-profile update failed for %s: %s", me.id, e.detail)
        raise UpstreamFailure("Failed to update profile")

    log.info("profile completed: user=%s role=%s school=%r", me.id, role, school_name)
    return {"success": True}

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.core import config
from app.core.errors import Forbidden, NotFound, Unauthorized, UpstreamFailure, ValidationFailed
from app.deps import get_admin_client, require_admin
from app.schemas.admin import TeacherOut
from app.schemas.identity import AuthContext, Identity
from app.services.identity import AdminIdentityClient, IdentityProviderError

log = logging.getLogger("admin")
router = APIRouter(prefix="/api/admin", tags=["admin"])

# 한 페이지만 조회한다. 전체 사용자가 1000명을 넘으면 일부가 누락된다
USERS_PAGE_SIZE = 1000

class VerifyCodeIn(BaseModel):
    code: Optional[Any] = None

class SchoolIn(BaseModel):
    schoolName: Optional[Any] = None

class ResetPasswordIn(BaseModel):
    userId: Optional[Any] = None

class TeacherEmailIn(BaseModel):
    email: Optional[Any] = None

def _required_str(v: Any, field: str) -> str:
    v = v.strip() if isinstance(v, str) else ""
    if not v:
        raise ValidationFailed(f"{field}이(가) 필요합니다.")
    return v

def _list_users(admin: AdminIdentityClient, what: str) -> list[Identity]:
    try:
        return admin.list_users(page=1, per_page=USERS_PAGE_SIZE)
    except IdentityProviderError as e:
        log.error("%s listUsers error: %s", what, e.detail)
        raise UpstreamFailure("조회에 실패했습니다.")

@router.post("/verify-code")
def verify_code(payload: VerifyCodeIn):
    # 입력값은 그대로 비교한다 (설정값은 로드 시 trim 됨). " pbk " 는 불일치
    code = payload.code if isinstance(payload.code, str) else ""
    if not code or code != config.ADMIN_CODE:
        raise Unauthorized("관리자 인증코드가 올바르지 않습니다.", ok=False)
    return {"ok": True}

@router.post("/count-by-school")
def count_by_school(
    payload: SchoolIn,
    _: AuthContext = Depends(require_admin),
    admin: AdminIdentityClient = Depends(get_admin_client),
):
    school = _required_str(payload.schoolName, "schoolName")
    users = _list_users(admin, "count-by-school")
    count = sum(1 for u in users if u.role == "admin" and u.school_name == school)
    return {"adminCount": count}

@router.post("/teachers")
def list_teachers(
    payload: SchoolIn,
    me: AuthContext = Depends(require_admin),
    admin: AdminIdentityClient = Depends(get_admin_client),
):
    school = _required_str(payload.schoolName, "schoolName")
    if school != me.school_name:
        raise Forbidden("같은 학교 소속만 조회할 수 있습니다.")

    users = _list_users(admin, "teachers")
    teachers = [
        TeacherOut(
            id=u.id,
            email=u.email,
            name=u.user_metadata.name,
            schoolName=u.school_name,
            createdAt=u.created_at,
        )
        for u in users
        if u.role == "teacher" and u.school_name == school
    ]
    return {"teachers": teachers}

@router.post("/reset-password")
def reset_password(
    payload: ResetPasswordIn,
    me: AuthContext = Depends(require_admin),
    admin: AdminIdentityClient = Depends(get_admin_client),
):
    user_id = _required_str(payload.userId, "userId")

    try:
        target = admin.get_user_by_id(user_id)
    except IdentityProviderError as e:
        log.error("reset-password lookup error: %s", e.detail)
        raise UpstreamFailure("비밀번호 초기화에 실패했습니다.")
    if target is None:
        raise NotFound("해당 회원을 찾을 수 없습니다.")
    if target.school_name != me.school_name:
        raise Forbidden("같은 학교 소속 회원만 초기화할 수 있습니다.")

    try:
        admin.update_user_by_id(target.id, password=config.RESET_PASSWORD)
    except IdentityProviderError as e:
        log.error("reset-password update error: %s", e.detail)
        raise UpstreamFailure("비밀번호 초기화에 실패했습니다.")

    log.info("password reset: admin=%s target=%s", me.id, target.id)
    return {"ok": True, "message": f"비밀번호가 {config.RESET_PASSWORD}으로 초기화되었습니다."}

@router.post("/verify-teacher-email")
def verify_teacher_email(
    payload: TeacherEmailIn,
    me: AuthContext = Depends(require_admin),
    admin: AdminIdentityClient = Depends(get_admin_client),
):
    email = _required_str(payload.email, "email").lower()

    users = _list_users(admin, "verify-teacher-email")
    teacher = next((u for u in users if u.email.lower() == email and u.role == "teacher"), None)
    if teacher is None:
        raise NotFound("해당 교원을 찾을 수 없습니다.")
    if teacher.school_name != me.school_name:
        raise Forbidden("같은 학교 소속만 조회할 수 있습니다.")

    return {
        "ok": True,
        "email": teacher.email,
        "name": teacher.user_metadata.name,
        "schoolName": teacher.school_name,
    }

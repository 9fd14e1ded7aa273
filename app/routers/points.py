import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.defaults import BASE_POINTS, LOGIN_POINTS_DEFAULT
from app.core.errors import Unauthorized, UpstreamFailure
from app.deps import get_db, get_auth_context, require_admin
from app.models.user_points import UserPoints
from app.schemas.identity import AuthContext
from app.services.settings import load_school_settings

log = logging.getLogger("points")
router = APIRouter(prefix="/api/points", tags=["points"])

def _require_email(me: AuthContext) -> str:
    if not me.email:
        raise Unauthorized("사용자를 확인할 수 없습니다.")
    return me.email

def _save(db: Session, row: UserPoints, what: str) -> None:
    try:
        db.merge(row)   # user_email 기준 upsert (last-write-wins)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        log.error("%s: %s", what, e)
        raise UpstreamFailure("포인트 반영에 실패했습니다.")

@router.post("/init")
def init_points(db: Session = Depends(get_db), me: AuthContext = Depends(get_auth_context)):
    """가입 시 기본 100점 부여. 누적이 아니라 매번 전체 초기화."""
    email = _require_email(me)
    _save(db, UserPoints(
        user_email=email,
        base_points=BASE_POINTS,
        login_points=0,
        last_login_date=None,
        login_points_that_day=0,
        updated_at=datetime.now(timezone.utc),
    ), "points/init")
    return {"ok": True, "base_points": BASE_POINTS}

@router.post("/login")
def login_points(db: Session = Depends(get_db), me: AuthContext = Depends(get_auth_context)):
    """로그인 시 학교 설정 점수를 하루 한 번만 추가한다 (UTC 날짜 기준)."""
    email = _require_email(me)
    today = datetime.now(timezone.utc).date()

    row = db.get(UserPoints, email)
    current = int(row.login_points or 0) if row else 0
    if row is not None and row.last_login_date == today:
        return {"added": 0, "login_points": current}

    settings = load_school_settings(db, me.school_name)
    added = settings.points.get("login_points", LOGIN_POINTS_DEFAULT)
    total = current + added

    _save(db, UserPoints(
        user_email=email,
        base_points=row.base_points if row is not None else BASE_POINTS,
        login_points=total,
        last_login_date=today,
        login_points_that_day=added,
        updated_at=datetime.now(timezone.utc),
    ), "points/login")

    out = {"added": added, "login_points": total}
    if added > 0:
        out["message"] = f"열정 포인트 +{added}점 획득"
    return out

@router.get("/school-settings")
def school_point_settings(db: Session = Depends(get_db), me: AuthContext = Depends(require_admin)):
    """관리자: 우리 학교 포인트 설정 + 6가지 영역(이름·단위)."""
    settings = load_school_settings(db, me.school_name)
    return {
        "settings": settings.points,
        "categories": [c.model_dump() for c in settings.categories],
    }

@router.get("/me")
def my_points(db: Session = Depends(get_db), me: AuthContext = Depends(get_auth_context)):
    """내 포인트: 기본 + 로그인 누적. 행이 없으면 기본 100점."""
    email = _require_email(me)
    row = db.get(UserPoints, email)
    base = int(row.base_points) if row is not None else BASE_POINTS
    login = int(row.login_points or 0) if row is not None else 0
    return {"total": base + login, "base": base, "login": login}

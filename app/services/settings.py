import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import UpstreamFailure
from app.domain.settings.service import default_settings, parse_settings
from app.models.school_settings import SchoolPointSettings
from app.schemas.settings import SchoolSettings

log = logging.getLogger("settings")

def load_school_settings(db: Session, school_name: str) -> SchoolSettings:
    """
    호출자 소속 학교의 설정 한 행을 읽어 파싱한다.
    학교명이 비어 있으면 조회하지 않고 기본값을 돌려준다.
    """
    school_name = (school_name or "").strip()
    if not school_name:
        return default_settings()
    try:
        row = db.get(SchoolPointSettings, school_name)
    except SQLAlchemyError as e:
        log.error("school_point_settings read failed for %r: %s", school_name, e)
        raise UpstreamFailure()
    return parse_settings(row)

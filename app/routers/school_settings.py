from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.deps import get_db, require_admin, require_teacher
from app.domain.settings.service import domains_to_questions
from app.schemas.identity import AuthContext
from app.schemas.settings import SchoolSettings
from app.services.settings import load_school_settings

router = APIRouter(prefix="/api", tags=["school-settings"])

def _domains(s: SchoolSettings) -> list[dict]:
    return [d.model_dump() for d in s.diagnosis_domains]

@router.get("/school-category-settings")
def school_category_settings(db: Session = Depends(get_db), me: AuthContext = Depends(require_teacher)):
    """소속 학교의 6가지 영역(이름·단위). 목표/마일리지/반성 화면 공통."""
    s = load_school_settings(db, me.school_name)
    return {"categories": [c.model_dump() for c in s.categories]}

@router.get("/school-diagnosis-settings")
def school_diagnosis_settings(db: Session = Depends(get_db), me: AuthContext = Depends(require_teacher)):
    s = load_school_settings(db, me.school_name)
    return {"domains": _domains(s)}

@router.get("/diagnosis-settings")
def diagnosis_settings(db: Session = Depends(get_db), me: AuthContext = Depends(require_teacher)):
    """사전/사후검사 문항 + 제목 (교사·관리자 공통, 항상 본인 학교만)."""
    s = load_school_settings(db, me.school_name)
    return {"domains": _domains(s), "title": s.diagnosis_title}

@router.get("/admin/diagnosis-settings")
def admin_diagnosis_settings(db: Session = Depends(get_db), me: AuthContext = Depends(require_admin)):
    s = load_school_settings(db, me.school_name)
    return {"domains": _domains(s), "title": s.diagnosis_title}

@router.get("/diagnosis-questions")
def diagnosis_questions(db: Session = Depends(get_db), me: AuthContext = Depends(require_teacher)):
    s = load_school_settings(db, me.school_name)
    domains = _domains(s)
    return {"domains": domains, "questions": [q.model_dump() for q in domains_to_questions(domains)]}

import json
import logging
import math
from numbers import Number
from typing import Any, Optional

from app.core.defaults import (
    CATEGORY_KEYS, UNIT_OPTIONS, DOMAIN_COUNT, ITEMS_PER_DOMAIN, MAX_POINT_AMOUNT,
    default_points, default_categories, default_domains,
)
from app.schemas.settings import SchoolSettings, DiagnosisQuestion

log = logging.getLogger("settings")

CURRENT_VERSION = 1
# version 1 의 최상위 키. 이 키가 하나도 없으면 예전(숫자만 있는) 포인트 맵으로 본다
V1_KEYS = ("points", "categories", "diagnosisDomains", "diagnosisTitle")

class InvalidSettings(Exception): ...

def default_settings() -> SchoolSettings:
    return SchoolSettings(
        points=default_points(),
        categories=default_categories(),
        diagnosis_domains=default_domains(),
        diagnosis_title="",
    )

# ---------- schema migration ----------

def migrate(obj: dict) -> dict:
    """저장된 blob 을 현재 버전 구조로 올린다. 지원하지 않는 버전이면 InvalidSettings."""
    version = obj.get("version", 0)
    if isinstance(version, bool) or not isinstance(version, int):
        raise InvalidSettings(f"version must be int, got {version!r}")

    if version == 0:
        if not any(k in obj for k in V1_KEYS):
            obj = {"points": obj}
        obj = {**obj, "version": 1}
        version = 1

    if version != CURRENT_VERSION:
        raise InvalidSettings(f"unsupported settings version {version}")
    return obj

# ---------- 필드별 정규화 ----------

def _is_amount(v: Any) -> bool:
    if isinstance(v, bool) or not isinstance(v, Number):
        return False
    return math.isfinite(v) and 0 <= v <= MAX_POINT_AMOUNT

def _points(raw: Any) -> dict:
    points = default_points()
    if isinstance(raw, dict):
        for k in points:
            v = raw.get(k)
            if not _is_amount(v):
                continue
            if k == "login_points":
                # 로그인 점수는 정수만 (1.5 같은 값은 기본값)
                if v != int(v):
                    continue
                v = int(v)
            points[k] = v
    return points

def _categories(raw: Any) -> list[dict]:
    defaults = {c["key"]: c for c in default_categories()}
    if not isinstance(raw, list):
        return [defaults[k] for k in CATEGORY_KEYS]

    out = []
    for key in CATEGORY_KEYS:
        found = next((c for c in raw if isinstance(c, dict) and c.get("key") == key), {})
        label = found.get("label")
        unit = found.get("unit")
        out.append({
            "key": key,
            "label": label.strip() if isinstance(label, str) and label.strip() else defaults[key]["label"],
            "unit": unit if unit in UNIT_OPTIONS else defaults[key]["unit"],
        })
    return out

def _domains(raw: Any) -> list[dict]:
    defaults = default_domains()
    if raw is None:
        return defaults
    if not isinstance(raw, list) or len(raw) != DOMAIN_COUNT:
        raise InvalidSettings("diagnosisDomains must have exactly 6 entries")

    out = []
    for d, default in zip(raw, defaults):
        if not isinstance(d, dict):
            out.append(default)
            continue
        name = d.get("name")
        raw_items = d.get("items") if isinstance(d.get("items"), list) else []
        items = []
        for i in range(ITEMS_PER_DOMAIN):
            t = raw_items[i] if i < len(raw_items) else None
            items.append(t.strip() if isinstance(t, str) and t.strip() else default["items"][i])
        out.append({
            "name": name.strip() if isinstance(name, str) and name.strip() else default["name"],
            "items": items,
        })
    return out

def _title(raw: Any) -> str:
    return raw.strip() if isinstance(raw, str) else ""

# ---------- API ----------

def parse_settings(row: Optional[Any]) -> SchoolSettings:
    """
    settings_json 한 행을 완전한 SchoolSettings 로 변환한다. 예외를 던지지 않는다.
    - 행 없음 / 빈 값 / JSON 오류 / 객체 아님 / 지원하지 않는 버전 -> 전체 기본값
    - diagnosisDomains 가 있는데 6개가 아님 -> 전체 기본값
    - diagnosisTitle 은 문자열이 아니면 "".
    """
    raw = getattr(row, "settings_json", None) if row is not None else None
    if not isinstance(raw, str) or not raw.strip():
        return default_settings()

    try:
        obj = json.loads(raw)
        if not isinstance(obj, dict):
            raise InvalidSettings(f"expected object, got {type(obj).__name__}")
        obj = migrate(obj)
        return SchoolSettings(
            version=CURRENT_VERSION,
            points=_points(obj.get("points")),
            categories=_categories(obj.get("categories")),
            diagnosis_domains=_domains(obj.get("diagnosisDomains")),
            diagnosis_title=_title(obj.get("diagnosisTitle")),
        )
    except (ValueError, InvalidSettings) as e:
        # pydantic.ValidationError 도 ValueError 의 하위 클래스
        school = getattr(row, "school_name", "?")
        log.warning("settings_json for %r ignored, using defaults: %s", school, e)
        return default_settings()

def domains_to_questions(domains: list) -> list[DiagnosisQuestion]:
    """6개 영역 x 5문항을 번호가 매겨진 30개 문항으로 펼친다."""
    questions: list[DiagnosisQuestion] = []
    for di, d in enumerate(domains):
        items = d["items"] if isinstance(d, dict) else d.items
        for text in items:
            questions.append(DiagnosisQuestion(
                id=str(len(questions) + 1),
                text=text,
                domain=f"domain{di + 1}",
            ))
    return questions

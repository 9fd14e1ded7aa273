from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Any, Literal, Optional

Role = Literal["teacher", "admin"]

def normalize_role(raw: Any) -> Optional[Role]:
    """
    metadata 의 자유 형식 `role` 을 하나의 정규 역할로 변환한다.
    - "teacher" / "admin" 은 그대로 유지.
    - 예전 배열 형식: "admin" 이 "teacher" 보다 우선.
    - 그 외 -> None (역할 미지정).
    """
    if isinstance(raw, str):
        return raw if raw in ("teacher", "admin") else None
    if isinstance(raw, (list, tuple)):
        if "admin" in raw:
            return "admin"
        if "teacher" in raw:
            return "teacher"
    return None

def _as_text(v: Any) -> str:
    return v if isinstance(v, str) else ""

class UserMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    role: Optional[Role] = None
    school_name: str = Field("", alias="schoolName")
    name: str = ""
    grade_class: str = Field("", alias="gradeClass")
    # 원본 metadata 에 role 값이 있었는지 (알 수 없는 값 포함)
    role_set: bool = False

    @model_validator(mode="before")
    @classmethod
    def _mark_role(cls, data):
        if isinstance(data, dict):
            data = {**data, "role_set": bool(data.get("role"))}
        return data

    @field_validator("role", mode="before")
    @classmethod
    def _role(cls, v):
        return normalize_role(v)

    @field_validator("school_name", "name", "grade_class", mode="before")
    @classmethod
    def _text(cls, v):
        return _as_text(v)

class Identity(BaseModel):
    """인증 서비스가 돌려주는 사용자."""
    model_config = ConfigDict(extra="ignore")

    id: str
    email: str = ""
    created_at: Optional[str] = None
    user_metadata: UserMetadata = Field(default_factory=UserMetadata)

    @field_validator("email", mode="before")
    @classmethod
    def _email(cls, v):
        return _as_text(v)

    @field_validator("user_metadata", mode="before")
    @classmethod
    def _meta(cls, v):
        return v if isinstance(v, (dict, UserMetadata)) else {}

    @property
    def role(self) -> Optional[Role]:
        return self.user_metadata.role

    @property
    def school_name(self) -> str:
        return self.user_metadata.school_name.strip()

class AuthContext(BaseModel):
    """요청마다 계산되는 호출자 컨텍스트 (캐시하지 않음)."""
    id: str
    email: str
    role: Optional[Role] = None
    school_name: str = ""
    name: str = ""

    @classmethod
    def from_identity(cls, user: Identity) -> "AuthContext":
        return cls(
            id=user.id,
            email=user.email,
            role=user.role,
            school_name=user.school_name,
            name=user.user_metadata.name,
        )

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def is_teacher(self) -> bool:
        # 관리자는 교원 권한도 가진다
        return self.role in ("teacher", "admin")

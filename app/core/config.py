import os
from dotenv import load_dotenv

load_dotenv()

def _env(*names: str, default: str = "") -> str:
    """여러 변수 이름 중 처음으로 비어있지 않은 값."""
    for n in names:
        v = (os.getenv(n) or "").strip()
        if v:
            return v
    return default

# ==== 인증 서비스 (Supabase) ====
SUPABASE_URL = _env("SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL").rstrip("/")
SUPABASE_ANON_KEY = _env("SUPABASE_ANON_KEY", "NEXT_PUBLIC_SUPABASE_ANON_KEY")
SUPABASE_SERVICE_ROLE_KEY = _env("SUPABASE_SERVICE_ROLE_KEY")
IDENTITY_TIMEOUT = int(os.getenv("IDENTITY_TIMEOUT", "10"))

# ==== DB (school_point_settings, user_points) ====
DATABASE_URL = _env("DATABASE_URL", default="sqlite:///./teachermate.db")

# 관리자 인증코드: 프로세스 시작 시 한 번만 읽는다. "pbk" 는 로컬 개발용 기본값 (안전하지 않음)
ADMIN_CODE = _env("NEXT_PUBLIC_ADMIN_CODE", "ADMIN_CODE", default="pbk")

# ==== Gemini (check-env 연결 확인 전용) ====
GEMINI_MODEL = _env("GEMINI_MODEL", default="gemini-2.0-flash")

APP_ENV = _env("APP_ENV", default="production")

# 공용 초기화 비밀번호 (관리자 비밀번호 초기화)
RESET_PASSWORD = "123456"

def is_development() -> bool:
    # check-env 는 요청 시점에 판단한다
    return _env("APP_ENV", default=APP_ENV).lower() == "development"

__all__ = [
    "SUPABASE_URL", "SUPABASE_ANON_KEY", "SUPABASE_SERVICE_ROLE_KEY", "IDENTITY_TIMEOUT",
    "DATABASE_URL", "ADMIN_CODE", "GEMINI_MODEL", "APP_ENV", "RESET_PASSWORD", "is_development",
]

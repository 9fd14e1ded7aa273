import logging
import os
from typing import Optional

from fastapi import APIRouter, Depends

from app.ai import gemini
from app.core import config
from app.core.errors import NotFound
from app.deps import get_optional_identity_client
from app.services.identity import IdentityClient, IdentityProviderError

log = logging.getLogger("diagnostics")
router = APIRouter(prefix="/api", tags=["diagnostics"])

# 값은 절대 반환하지 않고 설정 여부만 보여준다. 키 -> 함께 인정하는 별칭
ENV_KEYS = {
    "SUPABASE_URL": ("SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL"),
    "SUPABASE_ANON_KEY": ("SUPABASE_ANON_KEY", "NEXT_PUBLIC_SUPABASE_ANON_KEY"),
    "SUPABASE_SERVICE_ROLE_KEY": ("SUPABASE_SERVICE_ROLE_KEY",),
    "GEMINI_API_KEY": ("GEMINI_API_KEY",),
    "GEMINI_API_KEY_1": ("GEMINI_API_KEY_1",),
    "ADMIN_CODE": ("ADMIN_CODE",),
    "NEXT_PUBLIC_ADMIN_CODE": ("NEXT_PUBLIC_ADMIN_CODE",),
}

def _state(names: tuple) -> str:
    return "configured" if any((os.getenv(n) or "").strip() for n in names) else "empty"

def require_development() -> None:
    if not config.is_development():
        raise NotFound("Not available")

@router.get("/check-env", dependencies=[Depends(require_development)])
def check_env(identity: Optional[IdentityClient] = Depends(get_optional_identity_client)):
    """개발 환경 전용: env 설정 여부와 외부 서비스 연결 상태."""
    env = {k: _state(names) for k, names in ENV_KEYS.items()}
    env["GEMINI_AVAILABLE"] = "configured" if gemini.primary_key() else "empty"
    env["GEMINI_ROTATION_KEYS"] = str(gemini.rotation_key_count())

    if identity is None:
        identity_state = "skip"
    else:
        try:
            identity_state = "ok" if identity.check_session() else "fail"
        except IdentityProviderError as e:
            log.warning("identity probe failed: %s", e.detail)
            identity_state = "fail"

    return {
        "env": env,
        "connectivity": {"identity": identity_state, "gemini": gemini.probe()},
        "note": "키 값은 반환되지 않으며, 개발 환경에서만 동작합니다.",
    }

import logging
from functools import lru_cache
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core import config
from app.core.errors import Forbidden, Unauthorized
from app.db import get_db  # noqa: F401
from app.schemas.identity import AuthContext, Identity
from app.services.identity import AdminIdentityClient, IdentityClient

log = logging.getLogger("auth")

# auto_error=False: 헤더가 없거나 Bearer 형식이 아니면 None (네트워크 호출 없음)
bearer_scheme = HTTPBearer(auto_error=False)

@lru_cache
def get_identity_client() -> IdentityClient:
    """공개 키 클라이언트 (프로세스 전역, 최초 사용 시 생성)."""
    return IdentityClient(config.SUPABASE_URL, config.SUPABASE_ANON_KEY, config.IDENTITY_TIMEOUT)

@lru_cache
def get_admin_client() -> AdminIdentityClient:
    """서비스 롤 키 클라이언트 (프로세스 전역, 최초 사용 시 생성)."""
    return AdminIdentityClient(config.SUPABASE_URL, config.SUPABASE_SERVICE_ROLE_KEY, config.IDENTITY_TIMEOUT)

def get_bearer_token(creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> str:
    token = (creds.credentials if creds else "").strip()
    if not token:
        raise Unauthorized("인증이 필요합니다.")
    return token

def get_current_identity(
    token: str = Depends(get_bearer_token),
    identity: IdentityClient = Depends(get_identity_client),
) -> Identity:
    user = identity.get_user(token)
    if user is None:
        log.info("token rejected by identity provider")
        raise Unauthorized("사용자를 확인할 수 없습니다.")
    return user

def get_auth_context(user: Identity = Depends(get_current_identity)) -> AuthContext:
    return AuthContext.from_identity(user)

def require_teacher(ctx: AuthContext = Depends(get_auth_context)) -> AuthContext:
    # 관리자는 교원 권한도 가진다
    if not ctx.is_teacher:
        raise Forbidden("교원만 이용할 수 있습니다.")
    return ctx

def require_admin(ctx: AuthContext = Depends(get_auth_context)) -> AuthContext:
    # 학교 정보가 없는 관리자는 "같은 학교" 판정 대상이 될 수 없다
    if not ctx.is_admin or not ctx.school_name:
        raise Forbidden("관리자만 이용할 수 있습니다.")
    return ctx

def get_optional_identity_client() -> Optional[IdentityClient]:
    """연결 확인용: 설정이 없으면 None (skip)."""
    if not config.SUPABASE_URL or not config.SUPABASE_ANON_KEY:
        return None
    return get_identity_client()

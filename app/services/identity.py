"""
인증 서비스(Supabase Auth / GoTrue) HTTP 클라이언트.

권한이 다른 두 클라이언트:
- IdentityClient: 공개(anon) 키. 사용자 토큰 확인과 health check 만 한다.
- AdminIdentityClient: 서비스 롤 키. 사용자 목록 조회, 단건 조회, 수정.

서비스 롤 키는 호출자에게 절대 전달하지 않는다. 재시도 없음.
"""
import logging
from typing import Optional

import requests

from app.core.errors import UpstreamFailure
from app.schemas.identity import Identity

log = logging.getLogger("identity")

class IdentityProviderError(UpstreamFailure):
    def __init__(self, detail: str, status: Optional[int] = None):
        super().__init__("인증 서버 요청에 실패했습니다.")
        self.detail = detail
        self.status = status

class IdentityClient:
    def __init__(self, base_url: str, api_key: str, timeout: int = 10):
        if not base_url or not api_key:
            raise IdentityProviderError("identity provider URL/key not configured")
        self.base_url = base_url.rstrip("/")
        self._api_key = api_key
        self.timeout = timeout
        self._session = requests.Session()

    def _request(self, method: str, path: str, bearer: Optional[str] = None, **kw) -> requests.Response:
        headers = {"apikey": self._api_key, "Authorization": f"Bearer {bearer or self._api_key}"}
        try:
            return self._session.request(
                method, f"{self.base_url}/auth/v1{path}", headers=headers, timeout=self.timeout, **kw
            )
        except requests.RequestException as e:
            raise IdentityProviderError(f"{method} {path}: {e}") from e

    @staticmethod
    def _json(resp: requests.Response) -> dict:
        if resp.status_code >= 400:
            raise IdentityProviderError(f"non-2xx: {resp.status_code} body={resp.text[:400]}", resp.status_code)
        try:
            return resp.json()
        except ValueError as e:
            raise IdentityProviderError(f"invalid JSON: {resp.text[:200]}", resp.status_code) from e

    def get_user(self, token: str) -> Optional[Identity]:
        """토큰 -> 사용자. 토큰이 잘못되었거나 만료되면 None."""
        resp = self._request("GET", "/user", bearer=token)
        if resp.status_code in (401, 403, 404):
            return None
        data = self._json(resp)
        if not data.get("id"):
            return None
        return Identity.model_validate(data)

    def check_session(self) -> bool:
        resp = self._request("GET", "/health")
        return resp.status_code < 400

class AdminIdentityClient(IdentityClient):
    def list_users(self, page: int = 1, per_page: int = 1000) -> list[Identity]:
        """첫 페이지만 조회한다."""
        data = self._json(self._request("GET", "/admin/users", params={"page": page, "per_page": per_page}))
        return [Identity.model_validate(u) for u in (data.get("users") or [])]

    def get_user_by_id(self, user_id: str) -> Optional[Identity]:
        resp = self._request("GET", f"/admin/users/{user_id}")
        if resp.status_code in (400, 404):
            return None
        data = self._json(resp)
        return Identity.model_validate(data) if data.get("id") else None

    def update_user_by_id(self, user_id: str, *, user_metadata: Optional[dict] = None,
                          password: Optional[str] = None) -> Identity:
        body: dict = {}
        if user_metadata is not None:
            body["user_metadata"] = user_metadata
        if password is not None:
            body["password"] = password
        data = self._json(self._request("PUT", f"/admin/users/{user_id}", json=body))
        return Identity.model_validate(data)

# app/ai/gemini.py
import os
import logging
import requests

from app.core import config

BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"
MAX_NUMBERED_KEYS = 5

log = logging.getLogger("gemini")

# 재시도 없음: check-env 는 한 번의 호출 결과만 본다
_session = requests.Session()

def _key(name: str) -> str:
    return (os.getenv(name) or "").strip()

def numbered_keys() -> list[str]:
    """GEMINI_API_KEY_1 ~ _5 중 설정된 키."""
    return [k for k in (_key(f"GEMINI_API_KEY_{i}") for i in range(1, MAX_NUMBERED_KEYS + 1)) if k]

def primary_key() -> str:
    return _key("GEMINI_API_KEY") or _key("GEMINI_API_KEY_1")

def rotation_key_count() -> int:
    """정보 표시용. 요청 시점의 키 로테이션은 하지 않는다."""
    n = len(numbered_keys())
    if n:
        return n
    return 1 if _key("GEMINI_API_KEY") else 0

def _post_genai(model: str, payload: dict, api_key: str, timeout: int = 15) -> dict:
    """model 은 모델 id (예: 'gemini-2.0-flash'), URL 이 아님."""
    url = f"{BASE_URL}/{model}:generateContent"
    resp = _session.post(url, params={"key": api_key}, json=payload, timeout=timeout)
    if resp.status_code != 200:
        raise RuntimeError(f"[gemini] non-200: {resp.status_code} body={resp.text[:400]}")
    return resp.json()

def probe() -> str:
    """최소 입력으로 generateContent 를 한 번 호출한다. 'ok' | 'fail' | 'skip'."""
    api_key = primary_key()
    if not api_key:
        return "skip"
    payload = {
        "contents": [{"role": "user", "parts": [{"text": "1"}]}],
        "generationConfig": {"maxOutputTokens": 8},
    }
    try:
        _post_genai(config.GEMINI_MODEL, payload, api_key)
        return "ok"
    except requests.RequestException as e:
        # 메시지에 ?key= 가 포함된 URL 이 들어갈 수 있어 타입만 남긴다
        log.warning("gemini probe failed: %s", type(e).__name__)
        return "fail"
    except (RuntimeError, ValueError) as e:
        log.warning("gemini probe failed: %s", e)
        return "fail"

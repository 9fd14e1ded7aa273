from typing import Any

DEFAULT_ERROR = "처리 중 오류가 발생했습니다."

class AppError(Exception):
    """{"error": message} 응답으로 변환되는 도메인 오류."""
    status_code = 500

    def __init__(self, message: str = DEFAULT_ERROR, **extra: Any):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def payload(self) -> dict:
        return {**self.extra, "error": self.message}

class ValidationFailed(AppError):
    status_code = 400

class ProfileConflict(ValidationFailed):
    """이미 역할이 지정된 프로필."""

class Unauthorized(AppError):
    status_code = 401

class Forbidden(AppError):
    status_code = 403

class NotFound(AppError):
    status_code = 404

class UpstreamFailure(AppError):
    status_code = 500

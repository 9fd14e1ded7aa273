# Alembic autogenerate 용: 모든 모델을 import 해서 metadata 에 등록
from app.db import Base
from app.models.school_settings import SchoolPointSettings  # noqa: F401
from app.models.user_points import UserPoints  # noqa: F401

__all__ = ["Base"]

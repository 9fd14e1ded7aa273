from pydantic import BaseModel
from typing import Optional

class TeacherOut(BaseModel):
    """교원 목록용 공개 projection. metadata 의 다른 필드는 노출하지 않는다."""
    id: str
    email: str
    name: str
    schoolName: str
    createdAt: Optional[str] = None

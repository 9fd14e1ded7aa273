from pydantic import BaseModel, ConfigDict, Field
from typing import Annotated, List, Union

from app.core.defaults import DOMAIN_COUNT, ITEMS_PER_DOMAIN

class CategoryConfig(BaseModel):
    key: str
    label: str
    unit: str

class DiagnosisDomain(BaseModel):
    name: str
    items: Annotated[List[str], Field(min_length=ITEMS_PER_DOMAIN, max_length=ITEMS_PER_DOMAIN)]

# 역량 영역은 항상 정확히 6개
DiagnosisDomains = Annotated[List[DiagnosisDomain], Field(min_length=DOMAIN_COUNT, max_length=DOMAIN_COUNT)]

class SchoolSettings(BaseModel):
    """검증을 마친 학교별 설정 (settings_json version 1)."""
    model_config = ConfigDict(populate_by_name=True)

    version: int = 1
    points: dict[str, Union[int, float]]
    categories: List[CategoryConfig]
    diagnosis_domains: DiagnosisDomains = Field(alias="diagnosisDomains")
    diagnosis_title: str = Field("", alias="diagnosisTitle")

class DiagnosisQuestion(BaseModel):
    id: str
    text: str
    domain: str

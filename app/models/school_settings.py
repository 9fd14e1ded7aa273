from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.sql import func
from app.db import Base

class SchoolPointSettings(Base):
    __tablename__ = "school_point_settings"

    school_name = Column(String(255), primary_key=True)   # 정확히 일치(대소문자 구분)
    settings_json = Column(Text, nullable=True)           # {"version":1,"points":{...},"categories":[...],"diagnosisDomains":[...]}
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

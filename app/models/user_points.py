from sqlalchemy import Column, Integer, String, Date, DateTime
from sqlalchemy.sql import func
from app.db import Base

class UserPoints(Base):
    __tablename__ = "user_points"

    user_email = Column(String(255), primary_key=True)
    base_points = Column(Integer, nullable=False, default=100)
    login_points = Column(Integer, nullable=False, default=0)
    last_login_date = Column(Date, nullable=True)
    login_points_that_day = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime(timezone=True), server_default=func.now())

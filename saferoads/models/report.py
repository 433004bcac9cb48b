from sqlalchemy import Column, DateTime, Integer, func

from saferoads.database import Base


class Report(Base):
    __tablename__ = "reports"

    id = Column(Integer, primary_key=True, autoincrement=True)
    damage_score = Column(Integer)
    created_at = Column(DateTime, server_default=func.current_timestamp())

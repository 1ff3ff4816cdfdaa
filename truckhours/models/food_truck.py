import uuid
from sqlalchemy import Column, String, DateTime, JSON, Uuid, func
from truckhours.db.base import Base


class FoodTruck(Base):
    """
    A tenant. The weekly schedule lives inside the free-form
    `configuration` document under the "schedule" key.
    """
    __tablename__ = "food_trucks"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    subdomain = Column(String(63), nullable=False, unique=True)
    name = Column(String, nullable=True)
    configuration = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

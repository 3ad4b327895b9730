"""
Database entity for subscribers.
"""

from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func

from common.db.base import Base, BigIntegerType


class SubscriberEntity(Base):
    """
    Notification subscriber database entity.

    Email is the natural key and is always stored lower-cased.
    payment_date stays NULL until a payment is confirmed.
    """

    __tablename__ = "subscribers"

    id = Column(BigIntegerType, primary_key=True, index=True, autoincrement=True)
    email = Column(String(320), nullable=False, unique=True, index=True)
    phone = Column(String(64), nullable=False)

    # Origin (required) and destination (optional) of the visa slot search
    country_from = Column(String(128), nullable=False)
    city_from = Column(String(128), nullable=False)
    country_to = Column(String(128), nullable=True)
    city_to = Column(String(128), nullable=True)

    subscription_type = Column(String(64), nullable=False, index=True)
    payment_date = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

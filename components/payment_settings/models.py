"""Payment settings model for the database."""

from sqlalchemy import Column, DateTime, Integer, String, Text, func

from components.core.database import Base


class PaymentSettings(Base):
    """Payment preferences of one user, stored as a JSON document."""
    __tablename__ = "payment_settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(50), nullable=False, unique=True, default="default")
    settings_data = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

"""Payment category model for the database."""

import re

from sqlalchemy import CheckConstraint, Column, DateTime, String, event, func

from components.core.database import Base

DEFAULT_PAYMENT_CATEGORIES = (
    ("utilities", "#3b82f6"),
    ("rent", "#ef4444"),
    ("insurance", "#10b981"),
    ("loan", "#8b5cf6"),
    ("subscription", "#f59e0b"),
    ("tax", "#ec4899"),
    ("other", "#6b7280"),
)


def category_slug(name: str) -> str:
    """Derive a stable identifier from a category name."""
    slug = re.sub(r"[^a-z0-9\s]", "", name.lower())
    return re.sub(r"\s+", "-", slug.strip())[:50]


class PaymentCategory(Base):
    """Named, colored bucket for scheduled payments, referenced by name."""
    __tablename__ = "payment_categories"
    __table_args__ = (
        CheckConstraint("length(name) >= 2", name="ck_payment_categories_name_length"),
        CheckConstraint("color LIKE '#%' AND length(color) = 7", name="ck_payment_categories_color"),
    )

    id = Column(String(50), primary_key=True)
    name = Column(String(100), nullable=False, unique=True)
    color = Column(String(7), nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())


@event.listens_for(PaymentCategory.__table__, "after_create")
def insert_default_categories(target, connection, **kw) -> None:
    # Only runs when the table is created, so deleted defaults stay deleted
    connection.execute(
        target.insert(),
        [{"id": category_slug(name), "name": name, "color": color} for name, color in DEFAULT_PAYMENT_CATEGORIES],
    )

"""Catalog domain model — pure dataclass, no SQLAlchemy dependency."""
from dataclasses import dataclass
from datetime import datetime


@dataclass
class Product:
    id: str
    name: str
    price_cents: int  # >= 0
    stock: int  # >= 0, only ever decremented by sales
    brand: str | None = None
    category_id: str | None = None
    provider_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

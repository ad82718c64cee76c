"""PartyRepository: read-only raw SQL over the users table.

asyncpg NULL/array pattern: ids are passed as one CSV string and split in SQL.
Ids that are not valid UUIDs can never match, so they are dropped before querying.
"""
import uuid
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_party.domain.models import Party

_GET_PARTY_SQL = text("""
    SELECT id, name, email, role, is_active
    FROM users
    WHERE id = CAST(:id AS UUID)
""")

_GET_PARTIES_SQL = text("""
    SELECT id, name, email, role, is_active
    FROM users
    WHERE id = ANY(CAST(string_to_array(CAST(:ids_csv AS TEXT), ',') AS UUID[]))
""")


def _row_to_party(row: Any) -> Party:
    return Party(
        id=str(row.id),
        name=row.name,
        email=row.email,
        role=row.role,
        is_active=row.is_active,
    )


def _is_uuid(value: str) -> bool:
    try:
        uuid.UUID(value)
    except (ValueError, TypeError, AttributeError):
        return False
    return True


class PartyRepository:
    """Concrete implementation of PartyRepositoryProtocol."""

    async def get_by_id(self, user_id: str, db: AsyncSession) -> Party | None:
        if not _is_uuid(user_id):
            return None
        result = await db.execute(_GET_PARTY_SQL, {"id": user_id})
        row = result.fetchone()
        return _row_to_party(row) if row else None

    async def get_many(self, user_ids: list[str], db: AsyncSession) -> dict[str, Party]:
        valid_ids = sorted({uid for uid in user_ids if _is_uuid(uid)})
        if not valid_ids:
            return {}
        result = await db.execute(_GET_PARTIES_SQL, {"ids_csv": ",".join(valid_ids)})
        parties = [_row_to_party(row) for row in result.fetchall()]
        return {p.id: p for p in parties}

# Cher's Closet - Wardrobe Management Backend
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Persistence façade over the connection pool manager.

Every method issues plain SQL through ``ConnectionPoolManager`` and maps rows
into immutable domain models. Lookups return ``None`` (or ``False`` for
deletes) when the row does not exist; deciding whether that is a 404 is the
route's business.
"""

from datetime import date
from enum import Enum
from typing import Any, TypeVar

from beartype import beartype
from pydantic import BaseModel

from ..core.database import ConnectionPoolManager
from ..models.calendar import CalendarEntry
from ..models.inspiration import Inspiration
from ..models.outfit import Outfit, OutfitCreate, OutfitUpdate
from ..models.preferences import (
    MoodPreference,
    MoodPreferenceCreate,
    WeatherPreference,
    WeatherPreferenceCreate,
)
from ..models.user import User, UserCreate
from ..models.wardrobe import WardrobeItem, WardrobeItemCreate, WardrobeItemUpdate

ModelT = TypeVar("ModelT", bound=BaseModel)

USER_COLUMNS = "id, username, email, role, created_at"
WARDROBE_COLUMNS = (
    "id, user_id, name, category, subcategory, color, season, image_url, tags, "
    "favorite, created_at"
)
OUTFIT_COLUMNS = (
    "id, user_id, name, items, occasion, season, weather_conditions, mood, "
    "favorite, created_at"
)
INSPIRATION_COLUMNS = "id, title, description, image_url, tags, category, created_at"
WEATHER_PREFERENCE_COLUMNS = "id, user_id, weather_type, preferred_categories, created_at"
MOOD_PREFERENCE_COLUMNS = (
    "id, user_id, mood, preferred_colors, preferred_styles, created_at"
)
CALENDAR_COLUMNS = "id, user_id, outfit_id, planned_date, notes, created_at"


def _to_db(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, list):
        return [_to_db(v) for v in value]
    return value


def _row_to(model: type[ModelT], row: Any) -> ModelT | None:
    if row is None:
        return None
    return model.model_validate(dict(row))


def _insert_statement(table: str, values: dict[str, Any], returning: str) -> str:
    columns = ", ".join(values)
    placeholders = ", ".join(f"${i}" for i in range(1, len(values) + 1))
    return f"INSERT INTO {table} ({columns}) VALUES ({placeholders}) RETURNING {returning}"


def _update_statement(table: str, changes: dict[str, Any], returning: str) -> str:
    assignments = ", ".join(
        f"{column} = ${i}" for i, column in enumerate(changes, start=1)
    )
    return (
        f"UPDATE {table} SET {assignments} "
        f"WHERE id = ${len(changes) + 1} RETURNING {returning}"
    )


class Storage:
    """Typed data access for every entity of the wardrobe service."""

    @beartype
    def __init__(self, pool_manager: ConnectionPoolManager) -> None:
        self._db = pool_manager

    async def _insert(
        self, model: type[ModelT], table: str, values: dict[str, Any], returning: str
    ) -> ModelT:
        values = {column: _to_db(value) for column, value in values.items()}
        row = await self._db.fetch_row(
            _insert_statement(table, values, returning), *values.values()
        )
        result = _row_to(model, row)
        if result is None:
            raise RuntimeError(f"Insert into {table} returned no row")
        return result

    async def _update(
        self,
        model: type[ModelT],
        table: str,
        entity_id: int,
        changes: dict[str, Any],
        returning: str,
    ) -> ModelT | None:
        changes = {column: _to_db(value) for column, value in changes.items()}
        row = await self._db.fetch_row(
            _update_statement(table, changes, returning), *changes.values(), entity_id
        )
        return _row_to(model, row)

    async def _delete(self, table: str, entity_id: int) -> bool:
        status = await self._db.execute(f"DELETE FROM {table} WHERE id = $1", entity_id)
        return status.endswith(" 1")

    # Users

    @beartype
    async def get_user(self, user_id: int) -> User | None:
        row = await self._db.fetch_row(
            f"SELECT {USER_COLUMNS} FROM users WHERE id = $1", user_id
        )
        return _row_to(User, row)

    @beartype
    async def get_user_by_username(self, username: str) -> User | None:
        row = await self._db.fetch_row(
            f"SELECT {USER_COLUMNS} FROM users WHERE username = $1", username
        )
        return _row_to(User, row)

    @beartype
    async def get_user_credentials(self, username: str) -> tuple[User, str] | None:
        """User plus stored password hash, for login only."""
        row = await self._db.fetch_row(
            f"SELECT {USER_COLUMNS}, password FROM users WHERE username = $1",
            username,
        )
        if row is None:
            return None
        data = dict(row)
        password_hash = data.pop("password")
        return User.model_validate(data), password_hash

    @beartype
    async def create_user(self, data: UserCreate) -> User:
        return await self._insert(
            User,
            "users",
            {
                "username": data.username,
                "password": data.password_hash,
                "email": data.email,
                "role": data.role,
            },
            USER_COLUMNS,
        )

    @beartype
    async def list_users(self) -> list[User]:
        rows = await self._db.execute_query(
            f"SELECT {USER_COLUMNS} FROM users ORDER BY id"
        )
        return [User.model_validate(dict(row)) for row in rows]

    # Wardrobe items

    @beartype
    async def get_wardrobe_items(self, user_id: int) -> list[WardrobeItem]:
        rows = await self._db.execute_query(
            f"SELECT {WARDROBE_COLUMNS} FROM wardrobe_items "
            "WHERE user_id = $1 ORDER BY created_at DESC, id DESC",
            user_id,
        )
        return [WardrobeItem.model_validate(dict(row)) for row in rows]

    @beartype
    async def get_wardrobe_item(self, item_id: int) -> WardrobeItem | None:
        row = await self._db.fetch_row(
            f"SELECT {WARDROBE_COLUMNS} FROM wardrobe_items WHERE id = $1", item_id
        )
        return _row_to(WardrobeItem, row)

    @beartype
    async def create_wardrobe_item(
        self, user_id: int, data: WardrobeItemCreate
    ) -> WardrobeItem:
        values = {"user_id": user_id, **data.model_dump()}
        return await self._insert(
            WardrobeItem, "wardrobe_items", values, WARDROBE_COLUMNS
        )

    @beartype
    async def update_wardrobe_item(
        self, item_id: int, data: WardrobeItemUpdate
    ) -> WardrobeItem | None:
        changes = data.changes()
        if not changes:
            return await self.get_wardrobe_item(item_id)
        return await self._update(
            WardrobeItem, "wardrobe_items", item_id, changes, WARDROBE_COLUMNS
        )

    @beartype
    async def delete_wardrobe_item(self, item_id: int) -> bool:
        return await self._delete("wardrobe_items", item_id)

    # Outfits

    @beartype
    async def get_outfits(self, user_id: int) -> list[Outfit]:
        rows = await self._db.execute_query(
            f"SELECT {OUTFIT_COLUMNS} FROM outfits "
            "WHERE user_id = $1 ORDER BY created_at DESC, id DESC",
            user_id,
        )
        return [Outfit.model_validate(dict(row)) for row in rows]

    @beartype
    async def get_outfit(self, outfit_id: int) -> Outfit | None:
        row = await self._db.fetch_row(
            f"SELECT {OUTFIT_COLUMNS} FROM outfits WHERE id = $1", outfit_id
        )
        return _row_to(Outfit, row)

    @beartype
    async def create_outfit(self, user_id: int, data: OutfitCreate) -> Outfit:
        values = {"user_id": user_id, **data.model_dump()}
        return await self._insert(Outfit, "outfits", values, OUTFIT_COLUMNS)

    @beartype
    async def update_outfit(self, outfit_id: int, data: OutfitUpdate) -> Outfit | None:
        changes = data.changes()
        if not changes:
            return await self.get_outfit(outfit_id)
        return await self._update(Outfit, "outfits", outfit_id, changes, OUTFIT_COLUMNS)

    @beartype
    async def delete_outfit(self, outfit_id: int) -> bool:
        return await self._delete("outfits", outfit_id)

    # Inspirations

    @beartype
    async def get_inspirations(self) -> list[Inspiration]:
        rows = await self._db.execute_query(
            f"SELECT {INSPIRATION_COLUMNS} FROM inspirations ORDER BY id"
        )
        return [Inspiration.model_validate(dict(row)) for row in rows]

    @beartype
    async def get_inspiration(self, inspiration_id: int) -> Inspiration | None:
        row = await self._db.fetch_row(
            f"SELECT {INSPIRATION_COLUMNS} FROM inspirations WHERE id = $1",
            inspiration_id,
        )
        return _row_to(Inspiration, row)

    # Preferences

    @beartype
    async def get_weather_preferences(self, user_id: int) -> list[WeatherPreference]:
        rows = await self._db.execute_query(
            f"SELECT {WEATHER_PREFERENCE_COLUMNS} FROM weather_preferences "
            "WHERE user_id = $1 ORDER BY id",
            user_id,
        )
        return [WeatherPreference.model_validate(dict(row)) for row in rows]

    @beartype
    async def create_weather_preference(
        self, user_id: int, data: WeatherPreferenceCreate
    ) -> WeatherPreference:
        values = {"user_id": user_id, **data.model_dump()}
        return await self._insert(
            WeatherPreference, "weather_preferences", values, WEATHER_PREFERENCE_COLUMNS
        )

    @beartype
    async def get_mood_preferences(self, user_id: int) -> list[MoodPreference]:
        rows = await self._db.execute_query(
            f"SELECT {MOOD_PREFERENCE_COLUMNS} FROM mood_preferences "
            "WHERE user_id = $1 ORDER BY id",
            user_id,
        )
        return [MoodPreference.model_validate(dict(row)) for row in rows]

    @beartype
    async def create_mood_preference(
        self, user_id: int, data: MoodPreferenceCreate
    ) -> MoodPreference:
        values = {"user_id": user_id, **data.model_dump()}
        return await self._insert(
            MoodPreference, "mood_preferences", values, MOOD_PREFERENCE_COLUMNS
        )

    # Calendar

    @beartype
    async def get_calendar_entries(
        self, user_id: int, start: date, end: date
    ) -> list[CalendarEntry]:
        rows = await self._db.execute_query(
            f"SELECT {CALENDAR_COLUMNS} FROM calendar_outfits "
            "WHERE user_id = $1 AND planned_date BETWEEN $2 AND $3 "
            "ORDER BY planned_date, id",
            user_id,
            start,
            end,
        )
        return [CalendarEntry.model_validate(dict(row)) for row in rows]

    @beartype
    async def get_calendar_entry(self, entry_id: int) -> CalendarEntry | None:
        row = await self._db.fetch_row(
            f"SELECT {CALENDAR_COLUMNS} FROM calendar_outfits WHERE id = $1", entry_id
        )
        return _row_to(CalendarEntry, row)

    @beartype
    async def create_calendar_entry(
        self, user_id: int, outfit_id: int, planned_date: date, notes: str | None = None
    ) -> CalendarEntry:
        return await self._insert(
            CalendarEntry,
            "calendar_outfits",
            {
                "user_id": user_id,
                "outfit_id": outfit_id,
                "planned_date": planned_date,
                "notes": notes,
            },
            CALENDAR_COLUMNS,
        )

    @beartype
    async def delete_calendar_entry(self, entry_id: int) -> bool:
        return await self._delete("calendar_outfits", entry_id)

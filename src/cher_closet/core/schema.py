"""Database schema for the wardrobe service."""

import logging

from beartype import beartype

from .database import ConnectionPoolManager

logger = logging.getLogger(__name__)

SCHEMA_STATEMENTS: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS users (
        id SERIAL PRIMARY KEY,
        username TEXT NOT NULL UNIQUE,
        password TEXT NOT NULL,
        email TEXT,
        role TEXT NOT NULL DEFAULT 'user',
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS wardrobe_items (
        id SERIAL PRIMARY KEY,
        user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        name TEXT NOT NULL,
        category TEXT NOT NULL,
        subcategory TEXT,
        color TEXT,
        season TEXT,
        image_url TEXT,
        tags TEXT[] NOT NULL DEFAULT '{}',
        favorite BOOLEAN NOT NULL DEFAULT FALSE,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS outfits (
        id SERIAL PRIMARY KEY,
        user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        name TEXT NOT NULL,
        items INTEGER[] NOT NULL DEFAULT '{}',
        occasion TEXT,
        season TEXT,
        weather_conditions TEXT[] NOT NULL DEFAULT '{}',
        mood TEXT,
        favorite BOOLEAN NOT NULL DEFAULT FALSE,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS inspirations (
        id SERIAL PRIMARY KEY,
        title TEXT NOT NULL,
        description TEXT,
        image_url TEXT,
        tags TEXT[] NOT NULL DEFAULT '{}',
        category TEXT,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS weather_preferences (
        id SERIAL PRIMARY KEY,
        user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        weather_type TEXT NOT NULL,
        preferred_categories TEXT[] NOT NULL DEFAULT '{}',
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS mood_preferences (
        id SERIAL PRIMARY KEY,
        user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        mood TEXT NOT NULL,
        preferred_colors TEXT[] NOT NULL DEFAULT '{}',
        preferred_styles TEXT[] NOT NULL DEFAULT '{}',
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS calendar_outfits (
        id SERIAL PRIMARY KEY,
        user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        outfit_id INTEGER NOT NULL REFERENCES outfits(id) ON DELETE CASCADE,
        planned_date DATE NOT NULL,
        notes TEXT,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_wardrobe_items_user ON wardrobe_items(user_id)",
    "CREATE INDEX IF NOT EXISTS idx_outfits_user ON outfits(user_id)",
    """
    CREATE INDEX IF NOT EXISTS idx_calendar_outfits_user_date
        ON calendar_outfits(user_id, planned_date)
    """,
)

SEED_INSPIRATIONS: tuple[tuple[str, str, str, list[str]], ...] = (
    (
        "Monochrome Layers",
        "Tonal layering in a single color family for an elongated silhouette.",
        "minimalist",
        ["monochrome", "layering", "fall"],
    ),
    (
        "Weekend Denim",
        "Relaxed denim paired with a crisp white tee and clean sneakers.",
        "casual",
        ["denim", "casual", "spring"],
    ),
    (
        "Plaid Statement",
        "A plaid skirt anchored by knee socks and loafers.",
        "preppy",
        ["plaid", "preppy", "classic"],
    ),
)


@beartype
async def apply_schema(pool_manager: ConnectionPoolManager) -> None:
    """Create every table and index that does not exist yet."""
    for statement in SCHEMA_STATEMENTS:
        await pool_manager.execute(statement)
    logger.info(f"Applied {len(SCHEMA_STATEMENTS)} schema statements")


@beartype
async def seed_inspirations(pool_manager: ConnectionPoolManager) -> int:
    """Insert the sample inspirations when the table is empty."""
    row = await pool_manager.fetch_row("SELECT COUNT(*) AS total FROM inspirations")
    if row is not None and row["total"] > 0:
        return 0
    for title, description, category, tags in SEED_INSPIRATIONS:
        await pool_manager.execute(
            "INSERT INTO inspirations (title, description, category, tags) "
            "VALUES ($1, $2, $3, $4)",
            title,
            description,
            category,
            tags,
        )
    return len(SEED_INSPIRATIONS)

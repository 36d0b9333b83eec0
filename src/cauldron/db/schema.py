"""Schema definitions and seed data for the cauldron store."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SchemaEntry:
    """A named table or view and the DDL that creates it."""

    name: str
    ddl: str


@dataclass(frozen=True)
class SchemaRegistry:
    """Ordered table/view definitions plus the seed upserts applied after them.

    Entry order matters: a view must come after the tables it selects from.
    """

    entries: tuple[SchemaEntry, ...]
    seeds: tuple[str, ...] = ()

    def __post_init__(self):
        names = [entry.name for entry in self.entries]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate schema entries: {', '.join(duplicates)}")

    def table_names(self) -> list[str]:
        """Names of all entries in application order."""
        return [entry.name for entry in self.entries]

    def __iter__(self):
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


# ============================================================
# CAULDRON
# Single row tracking the installed version
# ============================================================
CAULDRON_TABLE = """
CREATE TABLE IF NOT EXISTS "cauldron" (
    "version"	TEXT NOT NULL COLLATE RTRIM,
    PRIMARY KEY("version")
);"""

# ============================================================
# DEPENDENCIES
# ============================================================
DEPENDENCIES_TABLE = """
CREATE TABLE IF NOT EXISTS "dependencies" (
    "id"	INTEGER,
    "name"	TEXT NOT NULL UNIQUE,
    "version"	TEXT,
    PRIMARY KEY("id" AUTOINCREMENT)
);"""

# ============================================================
# FAMILIARS
# ============================================================
FAMILIARS_TABLE = """
CREATE TABLE IF NOT EXISTS "familiars" (
    "id"	integer,
    "name"	TEXT NOT NULL UNIQUE COLLATE RTRIM,
    "display_name"	TEXT COLLATE RTRIM,
    "familiar_type"	TEXT NOT NULL COLLATE RTRIM,
    "unlocked"	INTEGER NOT NULL DEFAULT 0,
    "cow_src_ext"	INTEGER DEFAULT 0,
    "nickname"	TEXT COLLATE NOCASE,
    PRIMARY KEY("id" AUTOINCREMENT)
);"""

UNLOCKED_FAMILIARS_VIEW = (
    'CREATE VIEW IF NOT EXISTS "unlocked_familiars" AS '
    "SELECT * FROM familiars WHERE unlocked = 1;"
)

# Every non-key column is overwritten so seeded rows always match this file
_FAMILIAR_UPSERT = """INSERT INTO "familiars" ("id", "name", "display_name", "familiar_type", "unlocked", "cow_src_ext", "nickname") VALUES ({values})
      ON CONFLICT("id") DO UPDATE SET "name"=excluded."name", "display_name"=excluded."display_name", "familiar_type"=excluded."familiar_type", "unlocked"=excluded."unlocked", "cow_src_ext"=excluded."cow_src_ext", "nickname"=excluded."nickname";"""

FAMILIAR_SEEDS = tuple(
    _FAMILIAR_UPSERT.format(values=values)
    for values in (
        "'1', 'koala', NULL, 'Woodland-Cute', '1', NULL, NULL",
        "'2', 'hellokitty', 'Hello Kitty', 'Mascot-Cute', '1', NULL, NULL",
        "'3', 'suse', NULL, 'Jungle-Cute', '1', NULL, NULL",
        "'4', 'tux', NULL, 'Artic-Cute', '1', NULL, NULL",
        "'5', 'cock', 'Rooster', 'Farm', '1', NULL, NULL",
        "'6', 'duck', NULL, 'Farm-Urban-Cute', '1', NULL, NULL",
        "'7', 'trogdor', NULL, 'Meme', '1', '1', NULL",
    )
)

DEFAULT_REGISTRY = SchemaRegistry(
    entries=(
        SchemaEntry("cauldron", CAULDRON_TABLE),
        SchemaEntry("dependencies", DEPENDENCIES_TABLE),
        SchemaEntry("familiars", FAMILIARS_TABLE),
        SchemaEntry("unlocked_familiars", UNLOCKED_FAMILIARS_VIEW),
    ),
    seeds=FAMILIAR_SEEDS,
)

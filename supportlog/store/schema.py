"""Setup script offered when the backing table is missing."""
from supportlog.core.config import DEFAULT_TABLE
from supportlog.core.models import FIELD_TO_COLUMN, IDENTITY_FIELDS


def _column_ddl(column: str) -> str:
    kind = "text[]" if column == "sicOptions" else "text"
    name = f'"{column}"' if column != column.lower() else column
    return f"  {name} {kind}"


def setup_sql(table: str = DEFAULT_TABLE) -> str:
    """Return the ``create table`` script for ``table``."""

    columns = [
        "  id uuid default gen_random_uuid() primary key",
        "  created_at timestamp with time zone default timezone('utc'::text, now()) not null",
    ]
    columns += [
        _column_ddl(column)
        for name, column in FIELD_TO_COLUMN.items()
        if name not in IDENTITY_FIELDS
    ]
    body = ",\n".join(columns)
    return (
        "-- Run once in the SQL editor of the database:\n"
        f"create table if not exists {table} (\n{body}\n);\n\n"
        f"alter table {table} enable row level security;\n"
        f'create policy "Public Access" on {table} for all using (true);'
    )


SETUP_SQL = setup_sql()

"""Global pytest configuration."""

import os

# Tests run against the in-memory store unless a test builds a SQL store itself.
# A configured DATABASE_URL stays reachable for postgres-marked tests.
_database_url = os.environ.pop("DATABASE_URL", None)
if _database_url:
    os.environ.setdefault("TEST_DATABASE_URL", _database_url)

"""Local database engine and schema management."""

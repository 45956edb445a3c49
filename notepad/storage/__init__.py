"""
Persistent storage for the note collection.

Every backend keeps the whole collection in one named slot and rewrites it
in full on each save. Supported backends are a JSON file, a SQLite key-value
table and an in-process memory slot.
"""

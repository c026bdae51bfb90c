"""SQLite schema definition for the event store."""

from __future__ import annotations

# Schema version stamped into new databases
SCHEMA_VERSION = 1

SCHEMA = """
CREATE TABLE IF NOT EXISTS schema_version (version INTEGER PRIMARY KEY);

CREATE TABLE IF NOT EXISTS training_samples (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    features TEXT NOT NULL,
    action_type TEXT NOT NULL,
    effectiveness REAL NOT NULL CHECK (effectiveness >= 0 AND effectiveness <= 1),
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS usage_records (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    action_type TEXT NOT NULL,
    timestamp_ms INTEGER NOT NULL,
    success INTEGER NOT NULL,
    details TEXT NOT NULL DEFAULT '{}'
);

CREATE INDEX IF NOT EXISTS idx_training_action ON training_samples(action_type);
CREATE INDEX IF NOT EXISTS idx_usage_action_time ON usage_records(action_type, timestamp_ms);
"""

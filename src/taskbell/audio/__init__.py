"""Alarm sound: AlarmPlayer (shared, idempotent) and audio backends."""

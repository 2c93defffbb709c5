"""Citizen Alerts client core: incident ingestion, normalization and alert store."""

"""Ingestion, mapping and analytics services."""

"""Catalog ingestion: JSON/CSV files into validated tractor, terrain and implement models."""

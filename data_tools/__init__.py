"""Data validation tools."""

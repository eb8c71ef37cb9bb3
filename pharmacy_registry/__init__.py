"""Pharmacy establishment registry: validated, audited writes against a reference registry."""

"""Clients for downstream services."""

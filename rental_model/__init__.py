"""Rental investment projection engine and HTTP API."""

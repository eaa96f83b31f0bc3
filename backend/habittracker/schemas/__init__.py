# Schemas package init
"""Pydantic request/response models for the JSON API."""

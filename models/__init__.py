"""Pydantic request/response models for the grading API."""

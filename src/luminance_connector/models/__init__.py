"""Pydantic models for mapping configuration and Luminance payloads."""

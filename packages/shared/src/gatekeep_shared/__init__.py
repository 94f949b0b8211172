"""Shared infrastructure for the Gatekeep credential service.

Provides the Temporal client connection factory, task queue constants,
and the Pydantic contract models that cross the activity boundary.
"""

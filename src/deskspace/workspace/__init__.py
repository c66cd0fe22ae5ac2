"""Workspace data model, storage and orchestration."""

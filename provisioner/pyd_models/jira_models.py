"""
Pydantic models for the Jira endpoints.

Jira's own payloads (project, filter, board) are relayed unchanged inside
the composite result.
"""

from typing import Any, Dict

from pydantic import BaseModel


class ConnectionStatus(BaseModel):
    """Result of GET /jira/test-connection."""
    success: bool


class BoardCreationResult(BaseModel):
    """Everything created (or reused) while provisioning a board."""
    board: Dict[str, Any]
    project: Dict[str, Any]
    filter: Dict[str, Any]

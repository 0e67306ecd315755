"""Database module."""

from flowcanvas.db.database import close_database, get_db, init_database
from flowcanvas.db.workflow_store import WorkflowStore, workflow_store

__all__ = ["get_db", "init_database", "close_database", "workflow_store", "WorkflowStore"]

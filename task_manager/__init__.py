"""Task management REST backend: JWT auth, owner-scoped tasks, GridFS attachments."""

__version__ = "0.1.0"

"""FastAPI application layer for the web UI backend-for-frontend."""

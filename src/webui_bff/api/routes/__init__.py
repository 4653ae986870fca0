"""HTTP routes for the backend-for-frontend."""

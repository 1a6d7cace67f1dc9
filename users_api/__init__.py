"""Users CRUD API service."""

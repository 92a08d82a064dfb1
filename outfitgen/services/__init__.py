"""Application services used by the HTTP layer."""

"""Authentication, CORS and request logging middleware."""

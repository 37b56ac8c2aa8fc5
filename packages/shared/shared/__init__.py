"""Cross-service helpers: logging setup, Redis access and rate limiting."""

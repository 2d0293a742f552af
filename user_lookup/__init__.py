"""Read-only lookup and search API over the users table."""

"""Christmas Gifter API."""

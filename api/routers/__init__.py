"""Routers for the badge service; each is imported individually by api.main."""

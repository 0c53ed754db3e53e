"""Database-backed operations shared by the routers."""

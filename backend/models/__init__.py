# Importing the modules registers every table on Base.metadata
from models import users, menu, cart, order, store_settings, log  # noqa: F401

from .app import LudoServer, create_app
from .connections import ConnectionManager

__all__ = ["ConnectionManager", "LudoServer", "create_app"]

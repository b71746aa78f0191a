"""
Ludo Online
Authoritative room and game-state server for networked Ludo.
"""

__version__ = "0.1.0"

"""
wraith - command routing core for chat bots.
"""

__version__ = "0.4.0"
__logo__ = "👻"

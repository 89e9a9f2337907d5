# skillmarket/api/__init__.py
# This file makes the api directory a Python package.

from . import auth
from . import profiles
from . import requests
from . import search
from . import users

__all__ = [
    "auth",
    "profiles",
    "requests",
    "search",
    "users",
]

# skillmarket/models/__init__.py
# Import models in dependency order
from .user import User, RevokedToken
from .profile import Profile
from .swap_request import SwapRequest

__all__ = ["User", "RevokedToken", "Profile", "SwapRequest"]

from .api_client import SkillMarketClient, error_message
from .context import AuthContext, ClientSession
from .sequencing import RequestSequencer

__all__ = [
    "SkillMarketClient",
    "error_message",
    "AuthContext",
    "ClientSession",
    "RequestSequencer",
]

# skillmarket/schemas/__init__.py

# Auth schemas
from .auth import (
    Token,
    TokenData,
    SignUpRequest,
    LoginRequest,
    ResendVerificationRequest,
    UserOut,
    AuthResponse,
    SessionInfo,
)

# Profile schemas
from .profile import (
    Profile,
    ProfileUpsert,
    DiscoverableProfile,
    SimilarProfile,
    DiscoveryFilters,
    DiscoveryPage,
    ProfileLookup,
    PlatformStats,
)

# Search schemas
from .search import (
    SearchFilters,
    MatchInfo,
    SearchResult,
    SearchResponse,
)

# Swap request schemas
from .swap_request import (
    SwapRequestCreate,
    SwapRequestResponse,
    RequestFilters,
    RequestPage,
    SwapRequestResult,
    StatusUpdateResult,
)

__all__ = [
    "Token",
    "TokenData",
    "SignUpRequest",
    "LoginRequest",
    "ResendVerificationRequest",
    "UserOut",
    "AuthResponse",
    "SessionInfo",
    "Profile",
    "ProfileUpsert",
    "DiscoverableProfile",
    "SimilarProfile",
    "DiscoveryFilters",
    "DiscoveryPage",
    "ProfileLookup",
    "PlatformStats",
    "SearchFilters",
    "MatchInfo",
    "SearchResult",
    "SearchResponse",
    "SwapRequestCreate",
    "SwapRequestResponse",
    "RequestFilters",
    "RequestPage",
    "SwapRequestResult",
    "StatusUpdateResult",
]

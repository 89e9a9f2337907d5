from sqlalchemy import Column, String, ForeignKey, TIMESTAMP, ARRAY, JSON, func
from sqlalchemy.orm import relationship
from skillmarket.database import Base

AVAILABILITY_OPTIONS = ("weekends", "weekdays", "evenings", "flexible")
VISIBILITY_OPTIONS = ("public", "private", "friends_only")


# ---------------- PROFILE TABLE ----------------
# One row per user, keyed by the user's id (upserted on every save).
class Profile(Base):
    __tablename__ = "profiles"

    id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    name = Column(String(100), nullable=False)
    location = Column(String(150))
    # SQLite (used by tests) does not support ARRAY; store as JSON there.
    skills_offered = Column(ARRAY(String).with_variant(JSON, "sqlite"), default=list, nullable=False)
    skills_wanted = Column(ARRAY(String).with_variant(JSON, "sqlite"), default=list, nullable=False)
    availability = Column(String(20), default="weekends", nullable=False)
    profile_visibility = Column(String(20), default="public", nullable=False, index=True)
    avatar_url = Column(String(500))
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(
        TIMESTAMP,
        server_default=func.now(),
        onupdate=func.now()
    )

    user = relationship("User", back_populates="profile")

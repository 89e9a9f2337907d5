# skillmarket/models/swap_request.py
from sqlalchemy import Column, String, Text, Float, ForeignKey, TIMESTAMP, func
from sqlalchemy.orm import relationship
from skillmarket.database import Base
from skillmarket.models.user import new_id

REQUEST_STATUSES = ("pending", "accepted", "rejected", "completed")


class SwapRequest(Base):
    __tablename__ = "swap_requests"

    id = Column(String(36), primary_key=True, default=new_id)
    requester_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    recipient_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)

    # Snapshot of both sides at creation time
    requester_name = Column(String(100), nullable=False)
    recipient_name = Column(String(100), nullable=False)
    requester_avatar = Column(String(500))
    recipient_avatar = Column(String(500))
    requester_rating = Column(Float)
    recipient_rating = Column(Float)

    offered_skill = Column(String(100), nullable=False)
    wanted_skill = Column(String(100), nullable=False)
    message = Column(Text, nullable=False)
    status = Column(String(20), default="pending", nullable=False)
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    # Relationships
    requester = relationship("User", foreign_keys=[requester_id])
    recipient = relationship("User", foreign_keys=[recipient_id])

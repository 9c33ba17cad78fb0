from typing import TYPE_CHECKING
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from paperplay.db.base_class import Base

if TYPE_CHECKING:
    from .ticket import Ticket  # noqa: F401


class Letter(Base):
    ticket_code = Column(String, ForeignKey("ticket.code", ondelete="CASCADE"), primary_key=True, index=True)
    sender_name = Column(String, nullable=False)
    message_body = Column(Text, nullable=False)
    theme = Column(String, nullable=False, default="classic")
    image_url = Column(String)
    image_storage_key = Column(String)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    ticket = relationship("Ticket", back_populates="letter")

from typing import TYPE_CHECKING
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Enum, String
from sqlalchemy.orm import relationship

from paperplay.core.status import ContentKind
from paperplay.db.base_class import Base

if TYPE_CHECKING:
    from .letter import Letter  # noqa: F401


class Ticket(Base):
    code = Column(String, primary_key=True, index=True)
    batch_id = Column(String, index=True)

    # NULL content_kind means the ticket is unbound
    content_kind = Column(Enum(ContentKind), nullable=True, index=True)
    video_url = Column(String)
    video_storage_key = Column(String)

    unlock_at = Column(DateTime, nullable=True)
    visibility_flag = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    bound_at = Column(DateTime)

    letter = relationship("Letter", uselist=False, back_populates="ticket", lazy="joined",
                          cascade="all, delete-orphan")

    @property
    def is_bound(self) -> bool:
        return self.content_kind is not None

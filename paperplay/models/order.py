from datetime import datetime

from sqlalchemy import Column, DateTime, Enum, Integer, String

from paperplay.core.status import OrderStatus
from paperplay.db.base_class import Base, gen_rand_id


class LetterRequest(Base):
    id = Column(Integer, primary_key=True, index=True, default=gen_rand_id)
    # correlated with ticket.code by value only, orders outlive ticket cleanups
    ticket_code = Column(String, unique=True, index=True, nullable=False)
    customer_name = Column(String, nullable=False)
    contact_link = Column(String, nullable=False)
    category = Column(String)
    letter_type = Column(String)
    status = Column(Enum(OrderStatus), nullable=False, default=OrderStatus.PENDING, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

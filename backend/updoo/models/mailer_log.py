from __future__ import annotations

from sqlalchemy import Column, DateTime, Enum, Index, Integer, String, Text, func

from updoo.database import Base
from updoo.models.enums import MailStatus


class MailerLog(Base):
    __tablename__ = "mailer_logs"
    __table_args__ = (Index("idx_mailer_recipient", "recipient"),)

    id = Column(Integer, primary_key=True, index=True)
    recipient = Column(String(255), nullable=False)
    template = Column(String(100), nullable=False)
    subject = Column(String(500))
    status = Column(Enum(MailStatus, native_enum=False, length=20), nullable=False)
    provider_message_id = Column(String(255))
    error = Column(Text)
    created_at = Column(DateTime, server_default=func.now())

"""Append-only activity events for clients."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, func

from leadhub.app.db.base_class import Base


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    event_type = Column(String, nullable=False)
    payload = Column(Text, nullable=False, server_default="{}")
    created_at = Column(DateTime, server_default=func.current_timestamp())

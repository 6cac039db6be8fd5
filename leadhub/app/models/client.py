"""Client model for LeadHub leads."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, func

from leadhub.app.db.base_class import Base


class Client(Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String, nullable=False)
    email = Column(String, nullable=True, index=True)
    phone = Column(String, nullable=True)
    status = Column(String, nullable=False, server_default="new", index=True)
    source = Column(String, nullable=False, server_default="website", index=True)
    # JSON-encoded list of strings
    tags = Column(Text, nullable=False, server_default="[]")
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=True, index=True)
    created_at = Column(DateTime, server_default=func.current_timestamp())
    updated_at = Column(DateTime, server_default=func.current_timestamp())

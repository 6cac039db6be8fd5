"""Account model: people who sign in to the CRM."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, func

from leadhub.app.db.base_class import Base


class Account(Base):
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)
    role = Column(String, nullable=False, server_default="admin")
    api_key = Column(String, unique=True, nullable=True)
    default_business_id = Column(Integer, ForeignKey("businesses.id"), nullable=True)
    created_at = Column(DateTime, server_default=func.current_timestamp())

from leadhub.app.db.base_class import Base

# Import models to register metadata for Base.metadata.create_all
from leadhub.app.models.account import Account  # noqa: F401
from leadhub.app.models.business import Business  # noqa: F401
from leadhub.app.models.client import Client  # noqa: F401
from leadhub.app.models.note import Note  # noqa: F401
from leadhub.app.models.event import Event  # noqa: F401

import os

# Keep test runs away from the development database file
os.environ.setdefault("CRM_DATABASE_URL", "sqlite:///./test_crm.db")
os.environ.setdefault("JWT_SECRET", "test-secret")

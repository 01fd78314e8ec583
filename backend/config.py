"""
KrishiSetu - runtime settings read from the environment.
"""
import os

SECRET_KEY = os.environ.get("SECRET_KEY", "krishisetu-dev-secret-key-change-in-production")
ALGORITHM = os.environ.get("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.environ.get("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

# Bootstrap admin seeded into the account store at startup
ADMIN_EMAIL = os.environ.get("ADMIN_EMAIL", "admin@krishisetu.local")
ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD", "admin2025")

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
CORS_ORIGINS = [o.strip() for o in os.environ.get("CORS_ORIGINS", "*").split(",") if o.strip()]

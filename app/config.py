"""
Service configuration
MongoDB connection and Auth0 tenant settings
"""

import os
from dotenv import load_dotenv

load_dotenv()

# MongoDB
MONGO_URL = os.getenv("MONGO_URL", "mongodb://localhost:27017")
MONGO_DB_NAME = os.getenv("MONGO_DB_NAME", "netex_db")

# Auth0 tenant (API tokens are issued for AUTH0_AUDIENCE)
AUTH0_DOMAIN = os.getenv("AUTH0_DOMAIN", "fct-netex.eu.auth0.com")
AUTH0_AUDIENCE = os.getenv("AUTH0_AUDIENCE", "")
AUTH0_ALGORITHMS = [alg.strip() for alg in os.getenv("AUTH0_ALGORITHMS", "RS256").split(",") if alg.strip()]

# Machine-to-machine application used for the Management API
AUTH0_CLIENT_ID = os.getenv("AUTH0_CLIENT_ID", "")
AUTH0_CLIENT_SECRET = os.getenv("AUTH0_CLIENT_SECRET", "")
AUTH0_MANAGEMENT_AUDIENCE = os.getenv(
    "AUTH0_MANAGEMENT_AUDIENCE", f"https://{AUTH0_DOMAIN}/api/v2/"
)

AUTH0_TIMEOUT_SECONDS = float(os.getenv("AUTH0_TIMEOUT_SECONDS", "20"))

ADMIN_ROLE = os.getenv("ADMIN_ROLE", "admin")

CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

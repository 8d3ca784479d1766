"""
Kambaz Backend Configuration
Database, auth and runtime settings
"""

import os

# MongoDB
MONGO_URL = os.getenv("MONGO_URL", "mongodb://127.0.0.1:27017")
MONGO_DB_NAME = os.getenv("MONGO_DB_NAME", "kambaz")

# Auth tokens are issued by the external identity service
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "kambaz-secret-key")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

# Runtime
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# CORS
CLIENT_URL = os.getenv("CLIENT_URL")
ALLOWED_ORIGINS = [
    origin for origin in (
        CLIENT_URL,
        "http://localhost:3000",
        "http://localhost:5173",
    ) if origin
]

# Submissions
SUBMIT_MAX_RETRIES = int(os.getenv("SUBMIT_MAX_RETRIES", "3"))

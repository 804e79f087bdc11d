import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "vms_db"),
}

# Base URL printed into visitor QR codes (the sign-out link opened by the scanner)
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "http://localhost:3001")

# strict: only the first scan signs a visitor out; legacy: every scan reports success
SIGNOUT_POLICY = os.getenv("SIGNOUT_POLICY", "strict")

# allow: no token check; bearer: require "Authorization: Bearer <API_TOKEN>"
AUTH_POLICY = os.getenv("AUTH_POLICY", "allow")
API_TOKEN = os.getenv("API_TOKEN")

UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "uploads")
MAX_CONTENT_LENGTH = int(os.getenv("MAX_CONTENT_LENGTH", str(5 * 1024 * 1024)))

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_FILE = os.getenv("LOG_FILE")

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

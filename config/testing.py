import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "vms_test"),
}

PUBLIC_BASE_URL = "http://testserver"

SIGNOUT_POLICY = "strict"

AUTH_POLICY = "allow"
API_TOKEN = None

UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "uploads-test")
MAX_CONTENT_LENGTH = 1024 * 1024

LOG_LEVEL = "WARNING"
LOG_FILE = None

DEBUG = False
TESTING = True

AUTO_INIT_DB = False

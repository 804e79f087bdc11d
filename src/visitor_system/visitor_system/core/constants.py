"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

SIGNOUT_PATH = "/api/visitors/signout/{visitor_id}"
DEFAULT_PUBLIC_BASE_URL = "http://localhost:3001"

ALLOWED_IMAGE_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg", ".gif", ".webp"})
DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024

MIN_PASSWORD_LENGTH = 6

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_MAX_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 3

import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))

class Config:
    # Secrets
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-only-change-me")

    # SQLite database file stored next to the app as family_album.db
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL",
        "sqlite:///" + os.path.join(BASE_DIR, "family_album.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # 24 hours session lifetime
    SESSION_LIFETIME_SECONDS = int(os.getenv("SESSION_LIFETIME_SECONDS", str(24 * 60 * 60)))

    # bcrypt cost for PIN and admin password hashes
    PIN_HASH_ROUNDS = int(os.getenv("PIN_HASH_ROUNDS", "12"))

    # Admin login (set ADMIN_PASSWORD_HASH to a bcrypt hash in production)
    ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
    ADMIN_PASSWORD_HASH = os.getenv("ADMIN_PASSWORD_HASH")

    # PIN brute-force protection: 3 failures -> 10 min, 6 failures -> 24 h
    LOCKOUT_LEVEL1_MAX_ATTEMPTS = int(os.getenv("LOCKOUT_LEVEL1_MAX_ATTEMPTS", "3"))
    LOCKOUT_LEVEL1_COOLDOWN_SECONDS = int(os.getenv("LOCKOUT_LEVEL1_COOLDOWN_SECONDS", str(10 * 60)))
    LOCKOUT_LEVEL2_MAX_ATTEMPTS = int(os.getenv("LOCKOUT_LEVEL2_MAX_ATTEMPTS", "6"))
    LOCKOUT_LEVEL2_COOLDOWN_SECONDS = int(os.getenv("LOCKOUT_LEVEL2_COOLDOWN_SECONDS", str(24 * 60 * 60)))

    # Memory housekeeping for the lockout tables
    LOCKOUT_CLEANUP_INTERVAL_SECONDS = int(os.getenv("LOCKOUT_CLEANUP_INTERVAL_SECONDS", "3600"))
    LOCKOUT_CLEANUP_ENABLED = os.getenv("LOCKOUT_CLEANUP_ENABLED", "true").lower() == "true"

    # Post limits
    MAX_TITLE_LENGTH = 200
    MAX_DESCRIPTION_LENGTH = 2000

    # Basic app settings
    DEBUG = False

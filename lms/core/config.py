import os
from datetime import timedelta

# Secret and database location can be overridden from the environment.
SECRET_KEY = os.getenv("LMS_SECRET_KEY", "change-me-in-production")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE = timedelta(
    minutes=int(os.getenv("LMS_ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
)
BCRYPT_ROUNDS = int(os.getenv("LMS_BCRYPT_ROUNDS", "12"))

DATABASE_URL = os.getenv("LMS_DATABASE_URL", "sqlite:///./lms.db")

LOG_LEVEL = os.getenv("LMS_LOG_LEVEL", "INFO")

# Submission policy
GRACE_PERIOD_MINUTES = 10  # submissions within 10 mins after due are not late

# Dashboard
RECENT_ACTIVITY_LIMIT = 10

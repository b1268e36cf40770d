# storefront/utils/settings.py
import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./storefront.db")
CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", "redis://redis:6379/1")
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", "redis://redis:6379/2")
GUEST_CART_RETENTION_DAYS = int(os.getenv("GUEST_CART_RETENTION_DAYS", 30))
CART_COOKIE_NAME = os.getenv("CART_COOKIE_NAME", "cart_token")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

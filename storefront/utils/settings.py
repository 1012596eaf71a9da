# storefront/utils/settings.py
import os
from dotenv import load_dotenv

load_dotenv()

STOREFRONT_BACKEND = os.getenv("STOREFRONT_BACKEND", "sql")  # sql | json
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./storefront.db")
JSON_DB_PATH = os.getenv("JSON_DB_PATH", os.path.join("data", "db.json"))

CART_STORE = os.getenv("CART_STORE", "memory")  # memory | redis
REDIS_URL = os.getenv("REDIS_URL", "redis://redis:6379/0")
CART_TTL_SECONDS = int(os.getenv("CART_TTL_SECONDS", 7 * 24 * 60 * 60))
CART_LOCK_TTL_SECONDS = int(os.getenv("CART_LOCK_TTL_SECONDS", 30))
CART_LOCK_WAIT_SECONDS = float(os.getenv("CART_LOCK_WAIT_SECONDS", 5))
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "storefront_session")

CHAT_MODE = os.getenv("CHAT_MODE", "scripted")  # scripted | openai
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")

STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY", "")
HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", 10))

CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", "redis://redis:6379/1")
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", "redis://redis:6379/2")
CELERY_TASK_ALWAYS_EAGER = os.getenv("CELERY_TASK_ALWAYS_EAGER", "false").lower() in ("1", "true", "yes")

STORE_NAME = os.getenv("STORE_NAME", "JNG Solar & Security")
STORE_SHORT_NAME = os.getenv("STORE_SHORT_NAME", "JNG")
STORE_ADDRESS = os.getenv("STORE_ADDRESS", "Maputo, Mozambique")
STORE_PHONE = os.getenv("STORE_PHONE", "+258 84 000 0000")
STORE_HOURS = os.getenv("STORE_HOURS", "Mon-Fri 08:00 - 17:00")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

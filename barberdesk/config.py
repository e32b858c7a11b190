import os

from dotenv import load_dotenv


load_dotenv()


# =========================
# BANCO DE DADOS
# =========================

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./barberdesk.db")


# =========================
# JWT
# =========================

SECRET_KEY = os.getenv("SECRET_KEY", "troque-esta-chave")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))


# =========================
# LOG
# =========================

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


# =========================
# CLIENTE DA API
# =========================

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")
HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", "15"))

# intervalo fixo de consulta das notificações
NOTIFICATION_POLL_SECONDS = float(os.getenv("NOTIFICATION_POLL_SECONDS", "30"))

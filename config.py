import os

from dotenv import load_dotenv

from errors import ConfigurationError

load_dotenv()

API_KEY = os.environ.get("GEMINI_API_KEY") or os.environ.get("API_KEY")
MODEL = os.environ.get("GEMINI_MODEL", "gemini-2.5-flash")
TIMEOUT_MS = int(os.environ.get("GEMINI_TIMEOUT_MS", "300000"))
HOST = os.environ.get("HOST", "127.0.0.1")
PORT = int(os.environ.get("PORT", "5001"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

AVAILABLE_MODELS = [
    "gemini-3.1-pro-preview",
    "gemini-3-pro-preview",
    "gemini-3-flash-preview",
    "gemini-2.5-pro",
    "gemini-2.5-flash",
    "gemini-2.0-flash",
]

# Models that accept a thinking level.
THINKING_MODELS = {
    "gemini-3.1-pro-preview",
    "gemini-3-pro-preview",
    "gemini-3-flash-preview",
}

MISSING_API_KEY_MESSAGE = (
    "Klucz API Gemini nie jest skonfigurowany lub jest nieprawidłowy. "
    "Upewnij się, że zmienna środowiskowa GEMINI_API_KEY jest poprawnie ustawiona "
    "w pliku .env lub w konfiguracji środowiska wdrożenia. "
    "Aplikacja nie może działać bez ważnego klucza API."
)


def validate_api_key(key):
    """Raise ConfigurationError unless ``key`` looks like a usable credential."""
    if not key or key == "MISSING_API_KEY" or len(key) <= 10:
        raise ConfigurationError(MISSING_API_KEY_MESSAGE)
    return key


def validate_model(model):
    if model not in AVAILABLE_MODELS:
        raise ConfigurationError(f"Nieznany model: {model}")
    return model

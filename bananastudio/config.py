"""
Configuration
Values come from the process environment, optionally seeded from a .env file.
"""

import os
import secrets
from typing import Optional

from dotenv import load_dotenv

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# Path of the .env file already loaded in this process ('' when none was found)
_loaded_env_path: Optional[str] = None


def load_environment() -> str:
    """
    Load the first .env file found (project root, then working directory).
    Only the first call reads the filesystem; later calls return its result.

    Returns:
        str: path of the loaded file, or '' when none was found
    """
    global _loaded_env_path
    if _loaded_env_path is not None:
        return _loaded_env_path

    env_paths = [
        os.path.join(PROJECT_ROOT, '.env'),
        os.path.join(os.getcwd(), '.env'),
    ]
    _loaded_env_path = ''
    for env_path in env_paths:
        if os.path.exists(env_path):
            load_dotenv(env_path)
            print(f"✅ Loaded .env from: {env_path}")
            _loaded_env_path = env_path
            return env_path
    print("⚠️ No .env file found. Using system environment variables only.")
    return ''


def _env_flag(name: str, default: str = 'false') -> bool:
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


def get_gemini_api_key() -> str:
    # GOOGLE_API_KEY is accepted for older .env files
    return (os.getenv('GEMINI_API_KEY') or os.getenv('GOOGLE_API_KEY') or '').strip()


def get_text_model() -> str:
    return os.getenv('GEMINI_TEXT_MODEL', 'gemini-3-flash-preview')


def get_image_model() -> str:
    """
    Model id used for rendering. Override via GEMINI_IMAGE_MODEL when Google
    retires preview model ids.
    """
    return os.getenv('GEMINI_IMAGE_MODEL', 'gemini-2.5-flash-image')


class Config:
    """Flask configuration, read once when the app is created."""

    def __init__(self):
        self.SECRET_KEY = os.getenv('SECRET_KEY') or secrets.token_hex(32)
        self.MAX_CONTENT_LENGTH = int(os.getenv('MAX_UPLOAD_MB', '20')) * 1024 * 1024
        self.CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')
        # The studio session cookie is not sent on cross-site requests
        self.SESSION_COOKIE_SAMESITE = 'Lax'
        self.MAX_SESSIONS = int(os.getenv('MAX_SESSIONS', '100'))
        self.SESSION_IDLE_MINUTES = int(os.getenv('SESSION_IDLE_MINUTES', '60'))
        self.HOST = os.getenv('HOST', '0.0.0.0')
        self.PORT = int(os.getenv('PORT', '5000'))
        self.DEBUG = _env_flag('FLASK_DEBUG')

    def to_dict(self) -> dict:
        return {key: value for key, value in vars(self).items() if key.isupper()}

import os

from dotenv import load_dotenv


def load_environment() -> str:
    """Load .env from the project root without overriding real environment variables."""
    env_path = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), ".env")
    load_dotenv(env_path, override=False)
    return env_path

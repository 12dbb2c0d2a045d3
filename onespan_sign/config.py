import os

from dotenv import load_dotenv

from . import __version__

load_dotenv()


class Config:
    # OneSpan Sign environment
    ENV_URL = os.getenv('ENV_URL', '')
    CLIENT_ID = os.getenv('CLIENT_ID', '')
    CLIENT_SECRET = os.getenv('CLIENT_SECRET', '')

    # HTTP settings
    USER_AGENT = os.getenv('ONESPAN_USER_AGENT', f'onespan-sign-admin/{__version__}')
    REQUEST_TIMEOUT = float(os.getenv('ONESPAN_REQUEST_TIMEOUT', 30))

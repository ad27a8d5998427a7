"""
Centralized configuration
"""
import os
import logging
from pathlib import Path
from dotenv import load_dotenv

# Setup debug logger for configuration
_config_logger = logging.getLogger('config')

# Load .env from the current working directory if it exists
_env_file = Path.cwd() / '.env'
_dotenv_result = load_dotenv(_env_file)

DEBUG_MODE = os.getenv('DEBUG_MODE', 'false').lower() == 'true'
if DEBUG_MODE:
    logging.basicConfig(level=logging.DEBUG, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    _config_logger.setLevel(logging.DEBUG)
    _config_logger.debug(f"DEBUG_MODE enabled, .env loaded from {_env_file.absolute()}: {_dotenv_result}")

# Chunking defaults
MAX_TOKENS_PER_CHUNK = int(os.getenv('MAX_TOKENS_PER_CHUNK', '512'))
TOKEN_COUNTER = os.getenv('TOKEN_COUNTER', 'tiktoken')  # 'tiktoken' or 'words'
TIKTOKEN_ENCODING = os.getenv('TIKTOKEN_ENCODING', 'cl100k_base')
CHUNKER_MAX_WORKERS = int(os.getenv('CHUNKER_MAX_WORKERS', '1'))

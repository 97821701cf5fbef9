"""Configuration module for loading environment variables."""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Dataset configuration
QUOTES_DATA_PATH = os.getenv("QUOTES_DATA_PATH", "data/quotes.json")
# Unset means <data stem>.backup.json next to the data file
QUOTES_BACKUP_PATH = os.getenv("QUOTES_BACKUP_PATH") or None

# Saved quotes (local persistence)
SAVED_QUOTES_PATH = os.getenv("SAVED_QUOTES_PATH", "data/saved_quotes.json")

# Database configuration
DUCKDB_PATH = os.getenv("DUCKDB_PATH", "data/quotes.duckdb")

# Logging configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# API Keys
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-3.5-turbo")

# Analysis tuning
ANALYSIS_BATCH_SIZE = int(os.getenv("ANALYSIS_BATCH_SIZE", "10"))
ANALYSIS_BATCH_DELAY = float(os.getenv("ANALYSIS_BATCH_DELAY", "2.0"))
ANALYSIS_TIMEOUT = float(os.getenv("ANALYSIS_TIMEOUT", "30.0"))
# Max OpenAI calls per minute; 0 disables the limiter
ANALYSIS_RATE_LIMIT = int(os.getenv("ANALYSIS_RATE_LIMIT", "0"))

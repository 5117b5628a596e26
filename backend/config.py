"""Configuration management for DocQA RAG service."""
import os
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# API Keys
GROQ_API_KEY = os.getenv("GROQ_API_KEY")

# Server Configuration
PORT = int(os.getenv("PORT", "5000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")  # "text" or "json"

# CORS Configuration
CORS_ORIGINS = [
    origin.strip()
    for origin in [
        "http://localhost:5173",
        "http://localhost:3000",
        *os.getenv("ALLOWED_ORIGINS", "").split(","),
        os.getenv("FRONTEND_URL", ""),
    ]
    if origin and origin.strip()
]

# Storage Configuration
UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")

# Model Configuration
GENERATION_MODEL = os.getenv("GENERATION_MODEL", "llama-3.1-8b-instant")
GENERATION_TIMEOUT = float(os.getenv("GENERATION_TIMEOUT", "30"))  # seconds
GENERATION_MAX_TOKENS = int(os.getenv("GENERATION_MAX_TOKENS", "500"))
FALLBACK_MODEL_LABEL = "text-retrieval-fallback"

# Chunking Configuration
MIN_CHUNK_LENGTH = 50  # characters, chunks must be strictly longer

# Retrieval Configuration
MIN_TERM_LENGTH = 3  # terms must be strictly longer
MAX_CHUNKS = 5

# Answer Configuration
FALLBACK_EXCERPTS = 3
EXCERPT_LENGTH = 200
SNIPPET_LENGTH = 150

# Logging Configuration
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

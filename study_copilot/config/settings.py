"""
Configuration module for Study Copilot.

Supports both local development (environment variables / .env file) and
GCP production (Secret Manager for the API key).

Usage:
    from study_copilot.config import settings as config
    invoker = FallbackInvoker(api_key=config.GOOGLE_API_KEY, ...)
"""
import os
import logging
from typing import Optional

# Load environment variables from .env file (if present)
# This must happen before any os.getenv() calls
try:
    from dotenv import load_dotenv
    load_dotenv()
except ImportError:
    # python-dotenv not installed, skip .env loading
    pass

logger = logging.getLogger(__name__)


def is_gcp_environment() -> bool:
    """Check if running on GCP."""
    return (
        os.getenv("GAE_ENV") is not None or  # App Engine
        os.getenv("K_SERVICE") is not None or  # Cloud Run
        os.getenv("GOOGLE_CLOUD_PROJECT") is not None  # Any GCP service
    )


def get_secret(secret_id: str, project_id: Optional[str] = None) -> Optional[str]:
    """
    Get secret from environment variable (local) or Google Secret Manager (GCP).

    Priority:
    1. Environment variable (highest priority - works everywhere)
    2. Secret Manager (if on GCP and env var not set)
    3. None (if neither available)

    Args:
        secret_id: Secret name in Secret Manager or env var name
        project_id: GCP project ID (auto-detected if None)

    Returns:
        Secret value or None if not found
    """
    env_value = os.getenv(secret_id)
    if env_value:
        return env_value

    if not is_gcp_environment():
        return None

    try:
        from google.cloud import secretmanager
    except ImportError:
        # google-cloud-secret-manager not installed (install the "gcp" extra)
        return None

    project_id = project_id or os.getenv("GOOGLE_CLOUD_PROJECT")
    if not project_id:
        logger.warning(f"GOOGLE_CLOUD_PROJECT not set, cannot fetch secret {secret_id}")
        return None

    try:
        client = secretmanager.SecretManagerServiceClient()
        name = f"projects/{project_id}/secrets/{secret_id}/versions/latest"
        response = client.access_secret_version(request={"name": name})
        logger.info(f"Loaded secret {secret_id} from Secret Manager")
        return response.payload.data.decode("UTF-8")
    except Exception as e:
        # Secret not found or permission denied
        logger.warning(f"Could not fetch secret {secret_id} from Secret Manager: {e}")
        return None


# --- Model Configuration ---
# Primary tier: high-capability, may be unavailable for the caller's key.
# Secondary tier: fast, broadly available; also the target of tier fallback.
PRIMARY_MODEL = os.getenv("PRIMARY_MODEL", "gemini-3-pro-preview")
SECONDARY_MODEL = os.getenv("SECONDARY_MODEL", "gemini-2.5-flash")
IMAGE_MODEL_PRO = os.getenv("IMAGE_MODEL_PRO", "gemini-3-pro-image-preview")
IMAGE_MODEL_FAST = os.getenv("IMAGE_MODEL_FAST", "gemini-2.5-flash-image")
VIDEO_MODEL = os.getenv("VIDEO_MODEL", "veo-3.1-fast-generate-preview")

# One SDK-level attempt per call; tier fallback is the only recovery path.
LLM_MAX_RETRIES = int(os.getenv("LLM_MAX_RETRIES", "1"))

# --- Reasoning Budgets ---
ANALYSIS_THINKING_BUDGET = int(os.getenv("ANALYSIS_THINKING_BUDGET", "16384"))
AUTHORING_THINKING_BUDGET = int(os.getenv("AUTHORING_THINKING_BUDGET", "16384"))
SIMULATOR_THINKING_BUDGET = int(os.getenv("SIMULATOR_THINKING_BUDGET", "32768"))

# --- Pipeline Configuration ---
FACT_COUNT = int(os.getenv("FACT_COUNT", "20"))

# --- Ancillary Generators ---
QUIZ_QUESTION_COUNT = int(os.getenv("QUIZ_QUESTION_COUNT", "5"))
QUIZ_CONTEXT_CHARS = int(os.getenv("QUIZ_CONTEXT_CHARS", "10000"))
DEEP_DIVE_CONTEXT_CHARS = int(os.getenv("DEEP_DIVE_CONTEXT_CHARS", "5000"))

# --- Video Generation ---
VIDEO_RESOLUTION = os.getenv("VIDEO_RESOLUTION", "1080p")
VIDEO_POLL_INTERVAL_SECONDS = float(os.getenv("VIDEO_POLL_INTERVAL_SECONDS", "5"))

# --- API Keys (from Secret Manager or env vars) ---
# Priority: Environment variable > Secret Manager > None
GOOGLE_API_KEY = get_secret("GOOGLE_API_KEY")

if is_gcp_environment():
    logger.info("Running on GCP - using Secret Manager for API keys")
else:
    logger.info("Running locally - using environment variables for API keys")

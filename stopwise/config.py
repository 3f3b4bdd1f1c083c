"""Configuration management for StopWise."""
import os

from dotenv import load_dotenv

load_dotenv()

DEFAULT_OSRM_URL = "https://router.project-osrm.org"


def get_osrm_config():
    """Get OSRM routing service configuration."""
    return {
        "base_url": os.getenv("STOPWISE_OSRM_URL", DEFAULT_OSRM_URL).rstrip("/"),
        "profile": os.getenv("STOPWISE_OSRM_PROFILE", "driving"),
        "timeout": float(os.getenv("STOPWISE_REQUEST_TIMEOUT", 15)),
    }


def get_geocoder_config():
    """Get Nominatim geocoder configuration."""
    return {
        "user_agent": os.getenv("STOPWISE_GEOCODER_USER_AGENT", "stopwise_app"),
        "timeout": float(os.getenv("STOPWISE_GEOCODER_TIMEOUT", 10)),
    }


def get_routing_provider():
    """Get the leg routing provider name ("osrm" or "haversine")."""
    return os.getenv("STOPWISE_ROUTING_PROVIDER", "osrm").strip().lower()


def get_max_parallel_legs():
    """Get the number of legs that may be fetched concurrently."""
    return max(1, int(os.getenv("STOPWISE_MAX_PARALLEL_LEGS", 1)))


def get_log_level():
    return os.getenv("STOPWISE_LOG_LEVEL", "INFO").upper()

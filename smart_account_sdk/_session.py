"""
HTTP session factory shared by the remote service clients.
"""
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry


def create_session(retry_count: int = 3, backoff_factor: float = 0.5) -> requests.Session:
    """
    Create a requests session that retries idempotent failures.

    Args:
        retry_count: Number of retries for connection errors and 5xx responses
        backoff_factor: Exponential backoff factor between retries

    Returns:
        Configured requests.Session
    """
    session = requests.Session()
    retries = Retry(
        total=retry_count,
        backoff_factor=backoff_factor,
        status_forcelist=[500, 502, 503, 504],
        allowed_methods=["GET", "POST"],
        raise_on_status=False,
        connect=retry_count,
        read=retry_count,
        other=retry_count
    )
    session.mount("http://", HTTPAdapter(max_retries=retries))
    session.mount("https://", HTTPAdapter(max_retries=retries))
    return session

"""
Access tokens for the remote evaluation service.
"""

import threading
import time
from typing import Callable, Dict, Optional

import requests


class TokenProvider:
    """
    Fetches and caches a bearer token from the auth endpoint.

    The service answers {"access_token": ..., "expires_in": <epoch seconds>}.
    A cached token is reused until that instant. Failures return None:
    logs are then sent without an Authorization header.
    """

    def __init__(
        self,
        auth_url: str,
        credentials: Dict[str, str],
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
        time_func: Callable[[], float] = time.time,
    ):
        self.auth_url = auth_url
        self.credentials = credentials
        self.timeout = timeout
        self.session = session or requests.Session()
        self.time_func = time_func
        self._token: Optional[str] = None
        self._expires_at: Optional[float] = None
        self._lock = threading.Lock()

    @property
    def configured(self) -> bool:
        return bool(self.credentials.get("clientID"))

    def get_token(self) -> Optional[str]:
        if not self.configured:
            return None

        with self._lock:
            if self._token and self._expires_at and self.time_func() < self._expires_at:
                return self._token

            try:
                response = self.session.post(
                    self.auth_url,
                    json=self.credentials,
                    timeout=self.timeout
                )
                response.raise_for_status()
                data = response.json()
            except (requests.RequestException, ValueError) as e:
                print(f"❌ Failed to obtain authentication token: {e}")
                return None

            token = data.get("access_token")
            if not token:
                print("❌ Auth response did not contain an access token")
                return None

            self._token = token
            self._expires_at = float(data.get("expires_in") or 0)
            return self._token

    def invalidate(self):
        with self._lock:
            self._token = None
            self._expires_at = None


def build_credentials(settings) -> Dict[str, str]:
    """Credentials payload in the field names the auth endpoint expects"""
    fields = {
        "email": settings.auth_email,
        "name": settings.auth_name,
        "rollNo": settings.auth_roll_no,
        "accessCode": settings.auth_access_code,
        "clientID": settings.auth_client_id,
        "clientSecret": settings.auth_client_secret,
    }
    return {key: value for key, value in fields.items() if value}

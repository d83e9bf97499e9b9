# storefront/services/auth_client.py
import requests

from storefront.domain.errors import AuthServiceError
from storefront.utils.retry import http_retry
from storefront.utils.settings import AUTH_SERVICE_URL, AUTH_SERVICE_KEY
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# ~100 lat, tak platforma auth oznacza konto zbanowane
BAN_DURATION = "876000h"


class AuthClient:
    """
    Klient HTTP do zewnetrznego auth-service (sesje, konta, admin API).
    Klucz serwisowy wymagany dla /admin/*.
    """

    def __init__(self, base_url: str | None = None, service_key: str | None = None, timeout: int = 5):
        self.base_url = (base_url or AUTH_SERVICE_URL).rstrip("/")
        self.service_key = service_key if service_key is not None else AUTH_SERVICE_KEY
        self.timeout = timeout

    def _admin_headers(self) -> dict:
        return {
            "apikey": self.service_key,
            "Authorization": f"Bearer {self.service_key}",
        }

    def _check(self, resp: requests.Response, action: str) -> None:
        if resp.status_code >= 400:
            logger.error(f"Auth service {action} failed: {resp.status_code} {resp.text[:200]}")
            raise AuthServiceError(f"Auth service {action} failed")

    @http_retry()
    def get_user(self, access_token: str) -> dict | None:
        """Zwraca usera dla tokenu sesji albo None gdy token nieprawidlowy."""
        url = f"{self.base_url}/user"
        resp = requests.get(
            url,
            headers={"apikey": self.service_key, "Authorization": f"Bearer {access_token}"},
            timeout=self.timeout,
        )
        if resp.status_code in (401, 403):
            return None
        self._check(resp, "get user")
        return resp.json()

    @http_retry()
    def list_users(self, per_page: int = 1000) -> list[dict]:
        url = f"{self.base_url}/admin/users"
        logger.info(f"AuthClient GET {url}")
        resp = requests.get(url, headers=self._admin_headers(), params={"per_page": per_page}, timeout=self.timeout)
        self._check(resp, "list users")
        return resp.json().get("users", [])

    @http_retry()
    def ban_user(self, user_id: str) -> None:
        url = f"{self.base_url}/admin/users/{user_id}"
        logger.info(f"AuthClient PUT {url} (ban)")
        resp = requests.put(url, headers=self._admin_headers(), json={"ban_duration": BAN_DURATION}, timeout=self.timeout)
        self._check(resp, "ban user")

    @http_retry()
    def delete_user(self, user_id: str) -> None:
        url = f"{self.base_url}/admin/users/{user_id}"
        logger.info(f"AuthClient DELETE {url}")
        resp = requests.delete(url, headers=self._admin_headers(), timeout=self.timeout)
        self._check(resp, "delete user")

    @http_retry()
    def resend_verification(self, email: str) -> None:
        """Ponowny mail weryfikacyjny; jak sie nie uda, magic link."""
        resp = requests.post(
            f"{self.base_url}/resend",
            headers=self._admin_headers(),
            json={"type": "signup", "email": email},
            timeout=self.timeout,
        )
        if resp.status_code < 400:
            return

        logger.info(f"Resend failed ({resp.status_code}), falling back to magic link for {email}")
        resp = requests.post(
            f"{self.base_url}/admin/generate_link",
            headers=self._admin_headers(),
            json={"type": "magiclink", "email": email},
            timeout=self.timeout,
        )
        self._check(resp, "generate link")

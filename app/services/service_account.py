"""Google 서비스 계정 액세스 토큰 발급 모듈."""

from __future__ import annotations

import threading
import time

import jwt
import requests

from app.core.exceptions import RemoteUnavailableError, StoreConfigurationError
from app.core.logger import get_logger
from app.core.timeout_policy import to_requests_timeout

logger = get_logger(__name__)

DRIVE_SCOPE = "https://www.googleapis.com/auth/drive"
TOKEN_URI = "https://oauth2.googleapis.com/token"
_JWT_BEARER_GRANT = "urn:ietf:params:oauth:grant-type:jwt-bearer"
_ASSERTION_LIFETIME_SECONDS = 3600
_EXPIRY_MARGIN_SECONDS = 60


def clean_private_key(raw_key: str | None) -> str:
    """환경변수로 전달된 PEM 키를 정리합니다.

    감싼 따옴표를 제거하고 `\\n` 문자열을 실제 줄바꿈으로 바꿉니다.
    """
    if not raw_key:
        return ""
    key = raw_key.strip()
    if len(key) >= 2 and key[0] == key[-1] == '"':
        key = key[1:-1]
    return key.replace("\\n", "\n")


class ServiceAccountTokenProvider:
    """JWT bearer grant로 액세스 토큰을 발급하고 만료 직전까지 재사용합니다."""

    def __init__(
        self,
        client_email: str | None,
        private_key: str | None,
        scopes: list[str] | None = None,
        token_uri: str = TOKEN_URI,
        timeout_seconds: int = 10,
    ) -> None:
        self.client_email = (client_email or "").strip()
        self._private_key = clean_private_key(private_key)
        self._scopes = scopes or [DRIVE_SCOPE]
        self._token_uri = token_uri
        self._timeout_seconds = timeout_seconds
        self._access_token: str | None = None
        self._expires_at = 0.0
        self._lock = threading.Lock()

    @property
    def is_configured(self) -> bool:
        return bool(self.client_email and self._private_key)

    def _build_assertion(self, now: int) -> str:
        payload = {
            "iss": self.client_email,
            "scope": " ".join(self._scopes),
            "aud": self._token_uri,
            "iat": now,
            "exp": now + _ASSERTION_LIFETIME_SECONDS,
        }
        try:
            return jwt.encode(payload, self._private_key, algorithm="RS256")
        except (jwt.PyJWTError, ValueError, TypeError) as exc:
            raise StoreConfigurationError(f"서비스 계정 개인 키로 서명할 수 없습니다: {exc}") from exc

    def get_access_token(self) -> str:
        """유효한 액세스 토큰을 반환합니다. 필요하면 새로 발급합니다.

        Raises:
            StoreConfigurationError: 자격 증명이 없거나 토큰 발급이 거부된 경우.
            RemoteUnavailableError: 토큰 엔드포인트에 연결할 수 없는 경우.
        """
        if not self.is_configured:
            raise StoreConfigurationError("GOOGLE_CLIENT_EMAIL / GOOGLE_PRIVATE_KEY is not configured.")

        with self._lock:
            if self._access_token and time.time() < self._expires_at - _EXPIRY_MARGIN_SECONDS:
                return self._access_token

            now = int(time.time())
            assertion = self._build_assertion(now)
            try:
                response = requests.post(
                    self._token_uri,
                    data={"grant_type": _JWT_BEARER_GRANT, "assertion": assertion},
                    timeout=to_requests_timeout(self._timeout_seconds),
                )
            except requests.RequestException as exc:
                logger.error("Service account token request failed: %s", exc)
                raise RemoteUnavailableError(f"토큰 발급 요청 실패: {exc}") from exc

            if response.status_code >= 500:
                logger.error("Service account token endpoint error: status=%s", response.status_code)
                raise RemoteUnavailableError(f"토큰 엔드포인트 오류: status={response.status_code}")
            if response.status_code >= 400:
                body = (response.text or "")[:200]
                logger.error("Service account token rejected: status=%s body=%s", response.status_code, body)
                raise StoreConfigurationError(f"서비스 계정 토큰 발급이 거부되었습니다: {body}")

            try:
                data = response.json()
                self._access_token = data["access_token"]
                self._expires_at = now + int(data.get("expires_in", _ASSERTION_LIFETIME_SECONDS))
            except (ValueError, KeyError, TypeError) as exc:
                raise RemoteUnavailableError(f"토큰 응답 파싱 실패: {exc}") from exc

            logger.info("Service account token issued: client_email=%s", self.client_email)
            return self._access_token

"""Client for the external narrative-generation service (chat completions API)."""

import json
from typing import Any, Dict, Optional

import requests

from . import config
from .errors import CollaboratorFailure
from .logger import get_logger
from .retry import CircuitBreaker, CircuitOpenError, RetryError, exponential_backoff, should_retry_http_status


class RetryableStatusError(Exception):
    """Collaborator answered with a status worth retrying (408, 429, 5xx)."""

    def __init__(self, status: int, body: str = ""):
        self.status = status
        super().__init__(f"Retryable status {status}: {body[:200]}")


def parse_json_response(content: str) -> Dict[str, Any]:
    """Parse a JSON object from model output, tolerating markdown code fences.

    Raises:
        CollaboratorFailure: If the content is not a string holding a JSON object
    """
    if not isinstance(content, str):
        raise CollaboratorFailure(f"Collaborator content is not text: {type(content).__name__}")
    text = content.strip()
    if text.startswith("```json"):
        text = text[7:]
    elif text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    text = text.strip()

    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as e:
        raise CollaboratorFailure(f"Failed to parse collaborator response as JSON: {e}") from e
    if not isinstance(parsed, dict):
        raise CollaboratorFailure("Collaborator response is not a JSON object")
    return parsed


class NarrativeClient:
    """
    Sends one system+user prompt pair and returns the parsed JSON reply.

    Every failure (missing key, timeout, non-2xx, malformed body, open
    circuit) is raised as CollaboratorFailure.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        retry_delay: float = 1.0,
        breaker: Optional[CircuitBreaker] = None,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key if api_key is not None else config.NARRATIVE_API_KEY
        self.base_url = (base_url or config.NARRATIVE_BASE_URL).rstrip("/")
        self.model = model or config.NARRATIVE_MODEL
        self.max_tokens = max_tokens or config.NARRATIVE_MAX_TOKENS
        self.temperature = config.NARRATIVE_TEMPERATURE if temperature is None else temperature
        self.timeout = timeout or config.NARRATIVE_TIMEOUT_SECONDS
        self.breaker = breaker or CircuitBreaker(failure_threshold=5, recovery_timeout=60)
        self.session = session or requests.Session()

        retries = config.NARRATIVE_MAX_RETRIES if max_retries is None else max_retries
        self._send = exponential_backoff(
            max_retries=retries,
            base_delay=retry_delay,
            max_delay=10.0,
            exceptions=(requests.exceptions.Timeout, requests.exceptions.ConnectionError, RetryableStatusError),
            on_retry=self._on_retry,
        )(self._post)

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/chat/completions"

    def _on_retry(self, attempt: int, error: Exception, delay: float):
        get_logger().warning("Collaborator call failed, retrying", attempt=attempt, delay=delay, error=str(error))

    def _post(self, body: Dict[str, Any]) -> str:
        resp = self.session.post(
            self.endpoint,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            json=body,
            timeout=self.timeout,
        )
        if should_retry_http_status(resp.status_code):
            raise RetryableStatusError(resp.status_code, resp.text)
        if resp.status_code >= 400:
            raise CollaboratorFailure(
                f"Collaborator API error ({resp.status_code}): {resp.text[:200]}",
                status=resp.status_code,
            )

        try:
            data = resp.json()
            return data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise CollaboratorFailure(f"Malformed collaborator response: {e}") from e

    def complete(self, system_prompt: str, user_content: str) -> Dict[str, Any]:
        """
        Request a completion and parse its JSON content.

        Args:
            system_prompt: Instruction prompt
            user_content: Evidence context

        Returns:
            Parsed JSON object from the first choice

        Raises:
            CollaboratorFailure: On any failure
        """
        if not self.api_key:
            raise CollaboratorFailure("Narrative API key is not configured. Set NARRATIVE_API_KEY in .env")

        body = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content},
            ],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }

        try:
            content = self.breaker.call(self._send, body)
        except CircuitOpenError as e:
            raise CollaboratorFailure(str(e)) from e
        except RetryError as e:
            cause = e.__cause__
            status = getattr(cause, "status", None)
            raise CollaboratorFailure(f"Collaborator unavailable: {cause}", status=status) from e
        except requests.exceptions.RequestException as e:
            raise CollaboratorFailure(f"Collaborator request error: {e}") from e

        return parse_json_response(content)

"""Eligibility client abstraction and implementations."""

from __future__ import annotations

import logging
import time
import urllib.parse
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import httpx
from pydantic import BaseModel, StrictBool, ValidationError

from claimintake.config.settings import EligibilitySettings
from claimintake.core.errors import EligibilityError


if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

ELIGIBILITY_CHECK_PATH = "/api/v1/eligibility/check/{member_id}/{payer_id}"


class EligibilityResponse(BaseModel):
    """Body returned by the eligibility service."""

    eligible: StrictBool
    status: str | None = None
    message: str | None = None


class EligibilityClient(ABC):
    """Abstract base class for eligibility authorities."""

    @abstractmethod
    def check_eligibility(self, member_id: str, payer_id: str) -> bool:
        """Return True when the member has active coverage with the payer."""
        ...


class HttpEligibilityClient(EligibilityClient):
    """Calls the eligibility service over HTTP with a bounded timeout.

    ``timeout_seconds`` is applied twice: httpx uses it for each phase of the
    request (connect, write, each read), and the body is streamed against an
    overall deadline of the same length measured from the start of the call.
    A server trickling its answer is cut off at the first chunk received after
    the deadline, so a call lasts at most about twice the timeout.

    Transport failures, timeouts, non-2xx answers and bodies that do not
    carry a boolean ``eligible`` field all raise ``EligibilityError``.
    """

    def __init__(
        self,
        settings: EligibilitySettings | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Eligibility settings. Defaults are used if None.
            http_client: Optional httpx.Client for dependency injection (testing).
        """
        if settings is None:
            settings = EligibilitySettings()
        self.base_url = settings.base_url.rstrip("/")
        self.timeout = settings.timeout_seconds
        self._http_client = http_client

    def _build_url(self, member_id: str, payer_id: str) -> str:
        path = ELIGIBILITY_CHECK_PATH.format(
            member_id=urllib.parse.quote(member_id, safe=""),
            payer_id=urllib.parse.quote(payer_id, safe=""),
        )
        return f"{self.base_url}{path}"

    def check_eligibility(self, member_id: str, payer_id: str) -> bool:
        url = self._build_url(member_id, payer_id)
        headers = {"Accept": "application/json"}

        client = self._http_client
        should_close = False
        if client is None:
            client = httpx.Client(timeout=self.timeout)
            should_close = True
        deadline = time.monotonic() + self.timeout
        try:
            body = self._read_body(client, url, headers, deadline)
            payload = EligibilityResponse.model_validate_json(body)
        except httpx.TimeoutException as e:
            msg = f"Eligibility check timed out after {self.timeout}s"
            raise EligibilityError(msg) from e
        except httpx.HTTPStatusError as e:
            msg = f"Eligibility service returned HTTP {e.response.status_code}"
            raise EligibilityError(msg) from e
        except httpx.HTTPError as e:
            msg = f"Eligibility service request failed: {e}"
            raise EligibilityError(msg) from e
        except ValidationError as e:
            msg = f"Malformed eligibility response: {e.error_count()} errors"
            raise EligibilityError(msg) from e
        finally:
            if should_close:
                client.close()

        logger.debug(
            "Eligibility for member %s with payer %s: %s", member_id, payer_id, payload.eligible
        )
        return payload.eligible

    def _read_body(
        self, client: httpx.Client, url: str, headers: dict[str, str], deadline: float
    ) -> bytes:
        body = bytearray()
        with client.stream("GET", url, headers=headers, timeout=self.timeout) as response:
            response.raise_for_status()
            for chunk in response.iter_bytes():
                if time.monotonic() > deadline:
                    msg = f"Eligibility check exceeded its {self.timeout}s deadline"
                    raise EligibilityError(msg)
                body.extend(chunk)
        return bytes(body)


class StaticEligibilityClient(EligibilityClient):
    """Eligibility client answering from a fixed configuration.

    Used for mock runs and tests. Members listed in ``ineligible_members``
    are denied regardless of ``default``.
    """

    def __init__(self, default: bool = True, ineligible_members: Iterable[str] = ()) -> None:
        self.default = default
        self.ineligible_members = frozenset(ineligible_members)
        self.calls: list[tuple[str, str]] = []

    def check_eligibility(self, member_id: str, payer_id: str) -> bool:
        self.calls.append((member_id, payer_id))
        if member_id in self.ineligible_members:
            return False
        return self.default

"""Fail-closed eligibility gate."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from claimintake.eligibility.client import EligibilityClient

logger = logging.getLogger(__name__)


class EligibilityGate:
    """Turns an eligibility client into a yes/no decision that never raises.

    Any failure of the client, whatever its cause, is logged and treated as
    not eligible. An outage of the eligibility service therefore rejects
    claims instead of letting them through.
    """

    def __init__(self, client: EligibilityClient) -> None:
        self._client = client

    def check_eligibility(self, member_id: str, payer_id: str) -> bool:
        try:
            result = self._client.check_eligibility(member_id, payer_id)
        except Exception as e:
            logger.warning(
                "Eligibility check failed for member %s with payer %s, "
                "treating as not eligible: %s",
                member_id,
                payer_id,
                e,
            )
            return False
        if result is not True:
            if not isinstance(result, bool):
                logger.warning(
                    "Eligibility client returned non-boolean %r for member %s, "
                    "treating as not eligible",
                    result,
                    member_id,
                )
            return False
        return True

"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest

from claimintake.config.settings import Settings
from claimintake.core.models import ClaimSubmission
from claimintake.eligibility.client import StaticEligibilityClient
from claimintake.events.publisher import InMemoryPublisher
from claimintake.orchestrator.pipeline import ClaimsPipeline
from claimintake.storage.memory import InMemoryClaimStore
from claimintake.storage.repository import SQLiteClaimRepository


if TYPE_CHECKING:
    from collections.abc import Callable, Generator

    from claimintake.eligibility.client import EligibilityClient
    from claimintake.storage.base import ClaimStore


@pytest.fixture
def project_root() -> Path:
    """Get project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def submission_data() -> dict[str, Any]:
    """Raw request body for a clean single-line office visit claim."""
    return {
        "provider_id": "P1",
        "member_id": "M1",
        "payer_id": "PAY1",
        "service_date": "2024-03-15",
        "total_amount": "150.00",
        "claim_type": "professional",
        "claim_lines": [
            {
                "service_code": "99213",
                "service_date": "2024-03-15",
                "units": 1,
                "charged_amount": "150.00",
                "place_of_service": "11",
                "modifiers": ["25"],
                "description": "Office visit, established patient",
            }
        ],
        "diagnosis_codes": [
            {
                "code": "E11.9",
                "code_type": "ICD-10",
                "description": "Type 2 diabetes mellitus without complications",
                "is_primary": True,
                "sequence_number": 1,
            }
        ],
    }


@pytest.fixture
def make_submission(submission_data: dict[str, Any]) -> Callable[..., ClaimSubmission]:
    """Build a submission from the clean claim with field overrides."""

    def _make(**overrides: Any) -> ClaimSubmission:
        return ClaimSubmission.model_validate({**submission_data, **overrides})

    return _make


@pytest.fixture
def submission(make_submission: Callable[..., ClaimSubmission]) -> ClaimSubmission:
    return make_submission()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    settings = Settings()
    settings.storage.db_path = str(tmp_path / "claims.db")
    settings.events.async_dispatch = False
    return settings


@pytest.fixture
def memory_store() -> InMemoryClaimStore:
    return InMemoryClaimStore()


@pytest.fixture
def sqlite_repo(tmp_path: Path) -> SQLiteClaimRepository:
    return SQLiteClaimRepository(tmp_path / "claims.db")


@pytest.fixture(params=["memory", "sqlite"])
def store(request: pytest.FixtureRequest, tmp_path: Path) -> ClaimStore:
    """Each claim store implementation in turn."""
    if request.param == "memory":
        return InMemoryClaimStore()
    return SQLiteClaimRepository(tmp_path / "claims.db")


@pytest.fixture
def publisher() -> InMemoryPublisher:
    return InMemoryPublisher()


@pytest.fixture
def eligible_client() -> StaticEligibilityClient:
    return StaticEligibilityClient(default=True)


@pytest.fixture
def make_pipeline(
    store: ClaimStore, publisher: InMemoryPublisher, settings: Settings
) -> Generator[Callable[..., ClaimsPipeline], None, None]:
    """Build pipelines over the shared store and publisher."""
    created: list[ClaimsPipeline] = []

    def _make(eligibility_client: EligibilityClient | None = None) -> ClaimsPipeline:
        client = eligibility_client or StaticEligibilityClient(default=True)
        pipeline = ClaimsPipeline(store, client, publisher, settings=settings)
        created.append(pipeline)
        return pipeline

    yield _make
    for pipeline in created:
        pipeline.close()


@pytest.fixture
def pipeline(make_pipeline: Callable[..., ClaimsPipeline]) -> ClaimsPipeline:
    return make_pipeline()

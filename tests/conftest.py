"""Shared fixtures: a small catalog and a surgery factory."""

from collections.abc import Callable
from typing import Any

import pytest

from surgery_agenda.models import Doctor, Hospital, InsurancePlan, Surgery
from surgery_agenda.settings import Settings


@pytest.fixture
def doctors() -> list[Doctor]:
    return [
        Doctor(id="d1", name="Ana Souza", email="ana@example.com", color="hsl(10, 70%, 50%)", is_admin=True),
        Doctor(id="d2", name="Bruno Lima", email="bruno@example.com", color="hsl(120, 70%, 50%)"),
        Doctor(id="d3", name="Carla Dias", email="carla@example.com", color="hsl(240, 70%, 50%)"),
    ]


@pytest.fixture
def hospitals() -> list[Hospital]:
    return [Hospital(id="h1", name="Hospital Central"), Hospital(id="h2", name="Clínica Norte")]


@pytest.fixture
def insurance_plans() -> list[InsurancePlan]:
    return [InsurancePlan(id="p1", name="Particular"), InsurancePlan(id="p2", name="Saúde Mais")]


@pytest.fixture
def make_surgery() -> Callable[..., Surgery]:
    """Build a scheduled surgery with sensible defaults; keyword arguments override them."""

    def factory(id_: str = "s1", **overrides: Any) -> Surgery:
        data: dict[str, Any] = {
            "id": id_,
            "patient_name": f"Patient {id_}",
            "main_surgeon_id": "d1",
            "scheduled_at": "2024-03-10T14:30:00Z",
            "hospital_id": "h1",
            "insurance_id": "p1",
            "status": "Scheduled",
        }
        data.update(overrides)
        return Surgery.model_validate(data)

    return factory


@pytest.fixture
def utc_settings() -> Settings:
    return Settings(_env_file=None, display_timezone="UTC", write_retry_attempts=3, log_level="DEBUG")

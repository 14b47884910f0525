"""Launch pool models.

A launch pool is the database record of a launchpad-originated
collection. The discovery pipeline only reads these rows as a seed list
of addresses and display metadata.
"""

from datetime import datetime
from enum import Enum

from pydantic import Field, field_validator

from squidmarket.data.models.base import CamelModel, normalize_address


class LaunchStatus(str, Enum):
    """Lifecycle of a launch."""

    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class LaunchPool(CamelModel):
    """Row of the ``launch_pools`` table.

    Table schema expected:
        launch_pools (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            launch_id INTEGER UNIQUE NOT NULL,
            contract_address TEXT NOT NULL,
            launchpad_address TEXT NOT NULL,
            name TEXT NOT NULL, symbol TEXT NOT NULL,
            description TEXT, image_uri TEXT,
            max_supply INTEGER NOT NULL,
            creator TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'PENDING',
            auto_progress BOOLEAN DEFAULT FALSE,
            start_time TIMESTAMPTZ, end_time TIMESTAMPTZ,
            current_phase INTEGER, total_raised TEXT,
            created_at TIMESTAMPTZ DEFAULT NOW(),
            updated_at TIMESTAMPTZ DEFAULT NOW()
        )
    """

    id: str | None = None
    launch_id: int
    contract_address: str
    launchpad_address: str
    name: str
    symbol: str
    description: str | None = None
    image_uri: str | None = None
    max_supply: int = Field(ge=0)
    creator: str
    status: LaunchStatus = LaunchStatus.PENDING
    auto_progress: bool = False
    start_time: datetime | None = None
    end_time: datetime | None = None
    current_phase: int | None = None
    total_raised: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("contract_address", "launchpad_address", "creator")
    @classmethod
    def _lowercase_address(cls, v: str) -> str:
        return normalize_address(v)


class LaunchPoolCreate(CamelModel):
    """Payload for registering a new launch pool."""

    launch_id: int = Field(ge=0)
    contract_address: str = Field(min_length=1)
    launchpad_address: str = Field(min_length=1)
    name: str = Field(min_length=1)
    symbol: str = Field(min_length=1)
    description: str | None = None
    image_uri: str | None = None
    max_supply: int = Field(ge=0)
    creator: str = Field(min_length=1)
    status: LaunchStatus = LaunchStatus.PENDING
    auto_progress: bool = False


class LaunchPoolUpdate(CamelModel):
    """Partial update of a launch pool's status fields."""

    id: str = Field(min_length=1)
    status: LaunchStatus | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    current_phase: int | None = None
    total_raised: str | None = None

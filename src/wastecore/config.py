"""Application configuration and settings management."""

from typing import Any, Literal, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="WASTE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Waste Collection Coordination API"
    api_prefix: str = "/api"
    store_backend: Literal["memory", "supabase"] = Field(
        default="memory",
        description="Document store used for requests, centers and schedules.",
    )

    # Capacity planning
    truck_capacity: int = Field(
        default=1000,
        ge=1,
        description="Quantity units a single truck handles per allocation run.",
    )
    staff_per_truck: int = Field(default=2, ge=1, description="Crew size assigned to each truck.")
    allocation_max_workers: int = Field(
        default=4,
        ge=1,
        description="Upper bound on centers processed in parallel during an allocation batch.",
    )
    allocation_max_attempts: int = Field(
        default=3,
        ge=1,
        description="Compare-and-set attempts per center before the center is reported as failed.",
    )

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key for backend operations.",
    )

    # Checkout provider
    checkout_base_url: str = Field(default="https://api.stripe.com/v1")
    checkout_secret_key: Optional[str] = Field(
        default=None,
        description="Secret key for the checkout provider. Confirmation is disabled when unset.",
    )
    checkout_timeout_seconds: float = Field(default=10.0, gt=0.0)
    checkout_currency: str = Field(default="usd")
    checkout_client_url: str = Field(
        default="http://localhost:5173",
        description="Frontend base URL the provider redirects to after checkout.",
    )
    waste_prices: dict[str, float] = Field(
        default={
            "Glass": 15,
            "Wood": 10,
            "Hazardous": 60,
            "Paper": 10,
            "Metal": 20,
            "Plastic": 30,
            "Organic": 30,
            "Electronics": 50,
        },
        description="Price per quantity unit for each waste type.",
    )

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            # Try comma-separated
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            # Single value
            if value.strip():
                return (value.strip(),)
        # Return empty tuple if value is None or empty
        return tuple()


settings = Settings()

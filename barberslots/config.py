"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import List, Sequence

import pendulum
import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .domain.exceptions import ConfigurationError
from .domain.models import BusinessHours, Service


class BusinessHoursConfig(BaseModel):
    """Opening hours and slot grid."""
    start_hour: int = 9
    end_hour: int = 19
    slot_step_minutes: int = 30

    @field_validator("start_hour", "end_hour")
    @classmethod
    def validate_hour(cls, v: int) -> int:
        """Validate hour is between 0 and 24."""
        if not 0 <= v <= 24:
            raise ValueError(f"Hour must be between 0 and 24, got {v}")
        return v

    @field_validator("slot_step_minutes")
    @classmethod
    def validate_step(cls, value: int) -> int:
        """Ensure the grid step divides an hour evenly."""
        if value <= 0 or 60 % value:
            raise ValueError(f"slot_step_minutes must be a positive divisor of 60, got {value}")
        return value

    @model_validator(mode="after")
    def validate_hours_order(self) -> "BusinessHoursConfig":
        """Ensure the shop opens before it closes."""
        if self.end_hour <= self.start_hour:
            raise ValueError("end_hour must be later than start_hour")
        return self

    def to_business_hours(self) -> BusinessHours:
        return BusinessHours(
            start_hour=self.start_hour,
            end_hour=self.end_hour,
            slot_step_minutes=self.slot_step_minutes
        )


class BackendConfig(BaseModel):
    """Hosted backend connection."""
    url: str
    api_key: str


class Barber(BaseModel):
    """Barber configuration."""
    id: str
    name: str  # Used as alias


class ServiceConfig(BaseModel):
    """Catalog entry for a service."""
    id: str
    name: str
    duration_minutes: int
    price: float = 0.0

    @field_validator("duration_minutes")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("duration_minutes must be greater than zero")
        return value

    def to_service(self) -> Service:
        return Service(
            id=self.id,
            name=self.name,
            duration_minutes=self.duration_minutes,
            price=self.price
        )


class AppConfig(BaseModel):
    """Application configuration."""
    tenant_id: str
    backend: BackendConfig | None = None
    timezone: str = "America/Sao_Paulo"
    business_hours: BusinessHoursConfig = Field(default_factory=BusinessHoursConfig)
    barbers: List[Barber] = Field(default_factory=list)
    services: List[ServiceConfig] = Field(default_factory=list)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA name."""
        try:
            pendulum.timezone(value)
        except (KeyError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: '{value}'") from exc
        return value

    @field_validator("barbers")
    @classmethod
    def validate_barbers(cls, value: List[Barber]) -> List[Barber]:
        """Ensure barber ids and names are unique."""
        seen_ids: set[str] = set()
        seen_names: set[str] = set()
        for barber in value:
            name_key = barber.name.lower()
            if barber.id in seen_ids:
                raise ValueError(f"Duplicate barber id detected: {barber.id}")
            if name_key in seen_names:
                raise ValueError(f"Duplicate barber name detected: {barber.name}")
            seen_ids.add(barber.id)
            seen_names.add(name_key)
        return value

    @field_validator("services")
    @classmethod
    def validate_services(cls, value: List[ServiceConfig]) -> List[ServiceConfig]:
        """Ensure service ids are unique."""
        seen_ids: set[str] = set()
        for service in value:
            if service.id in seen_ids:
                raise ValueError(f"Duplicate service id detected: {service.id}")
            seen_ids.add(service.id)
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ConfigurationError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ConfigurationError("Config file must contain a mapping at the root level.")

        try:
            return cls(**data)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid configuration in {config_path}: {exc}") from exc

    def catalog(self) -> List[Service]:
        """Return the service catalog as domain objects."""
        return [service.to_service() for service in self.services]

    def find_barber(self, identifier: str) -> Barber | None:
        """Find a barber by id or by name (case-insensitive)."""
        for barber in self.barbers:
            if barber.id == identifier or barber.name.lower() == identifier.lower():
                return barber
        return None

    def resolve_barber(self, identifier: str) -> Barber:
        """
        Resolve a barber identifier (id or name) to a configured barber.

        Raises:
            ValueError: If identifier cannot be resolved
        """
        barber = self.find_barber(identifier)
        if barber:
            return barber

        raise ValueError(
            f"Unknown barber identifier: '{identifier}'. "
            f"Use a configured barber id or name."
        )

    def resolve_services(self, identifiers: Sequence[str]) -> List[str]:
        """
        Resolve service identifiers (id or name) to unique service ids.

        Args:
            identifiers: Service ids or names, in selection order

        Returns:
            List of service ids without duplicates

        Raises:
            ValueError: If any identifier is unknown
        """
        resolved_ids: List[str] = []
        unknown_identifiers: List[str] = []

        for identifier in identifiers:
            match = next(
                (
                    s for s in self.services
                    if s.id == identifier or s.name.lower() == identifier.lower()
                ),
                None
            )
            if match is None:
                unknown_identifiers.append(identifier)
                continue

            if match.id not in resolved_ids:
                resolved_ids.append(match.id)

        if unknown_identifiers:
            missing = ", ".join(sorted(set(unknown_identifiers)))
            raise ValueError(
                f"Unknown service identifier(s): {missing}. "
                "Ensure they exist in the configuration."
            )

        return resolved_ids


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    config_path = Path.cwd() / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path

import os
import logging
from typing import List, Optional

from dotenv import load_dotenv

from places_autocomplete.errors import InvalidConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_TIME = 600  # milliseconds
DEFAULT_RADIUS = 500  # meters
DEFAULT_HTTP_TIMEOUT = 10.0  # seconds

_TRUE_VALUES = ('1', 'true', 'yes', 'on')


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == '':
        return default
    return value.strip().lower() in _TRUE_VALUES


def _env_float(name: str) -> Optional[float]:
    value = os.getenv(name)
    if value is None or value.strip() == '':
        return None
    try:
        return float(value)
    except ValueError:
        raise InvalidConfigurationError(f"{name} must be a number, got {value!r}")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value.strip() == '':
        return default
    try:
        return int(value)
    except ValueError:
        raise InvalidConfigurationError(f"{name} must be an integer, got {value!r}")


class AutocompleteConfig:
    def __init__(self,
                 api_key: str,
                 debounce_time: int = DEFAULT_DEBOUNCE_TIME,
                 radius: int = DEFAULT_RADIUS,
                 countries: List[str] = None,
                 latitude: float = None,
                 longitude: float = None,
                 strict: bool = False,
                 is_lat_lng_required: bool = True,
                 http_timeout: float = DEFAULT_HTTP_TIMEOUT):
        self.api_key = api_key
        self.debounce_time = debounce_time
        self.radius = radius
        self.countries = list(countries) if countries else None
        self.latitude = latitude
        self.longitude = longitude
        self.strict = strict
        self.is_lat_lng_required = is_lat_lng_required
        self.http_timeout = http_timeout

    @property
    def quiet_period(self) -> float:
        """Debounce time in seconds, as the event loop wants it."""
        return self.debounce_time / 1000.0

    @property
    def has_location_bias(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def validate(self) -> 'AutocompleteConfig':
        if not self.api_key or not str(self.api_key).strip():
            raise InvalidConfigurationError("Missing Google Places API key")
        if self.debounce_time is None or self.debounce_time < 0:
            raise InvalidConfigurationError("debounce_time must be zero or a positive number of milliseconds")
        if self.radius is None or self.radius <= 0:
            raise InvalidConfigurationError("radius must be a positive number of meters")
        if self.http_timeout is not None and self.http_timeout <= 0:
            raise InvalidConfigurationError("http_timeout must be positive")

        if (self.latitude is None) != (self.longitude is None):
            raise InvalidConfigurationError("latitude and longitude must be provided together")
        if self.has_location_bias:
            if self.latitude == 0.0 or self.longitude == 0.0:
                raise InvalidConfigurationError("Latitude & Longitude cannot be 0.0")
            if not -90.0 <= self.latitude <= 90.0:
                raise InvalidConfigurationError(f"latitude out of range: {self.latitude}")
            if not -180.0 <= self.longitude <= 180.0:
                raise InvalidConfigurationError(f"longitude out of range: {self.longitude}")

        if self.countries is not None:
            for country in self.countries:
                if not isinstance(country, str) or not country.strip():
                    raise InvalidConfigurationError(f"Invalid country code: {country!r}")
        return self

    @classmethod
    def from_env(cls) -> 'AutocompleteConfig':
        """Build a config from environment variables (and a .env file, if present)."""
        load_dotenv()

        countries_value = os.getenv('PLACES_COUNTRIES', '')
        countries = [c.strip() for c in countries_value.split(',') if c.strip()]
        http_timeout = _env_float('PLACES_HTTP_TIMEOUT')

        config = cls(
            api_key=os.getenv('GOOGLE_PLACES_API_KEY'),
            debounce_time=_env_int('PLACES_DEBOUNCE_MS', DEFAULT_DEBOUNCE_TIME),
            radius=_env_int('PLACES_RADIUS', DEFAULT_RADIUS),
            countries=countries or None,
            latitude=_env_float('PLACES_LATITUDE'),
            longitude=_env_float('PLACES_LONGITUDE'),
            strict=_env_bool('PLACES_STRICT', False),
            is_lat_lng_required=_env_bool('PLACES_LATLNG_REQUIRED', True),
            http_timeout=DEFAULT_HTTP_TIMEOUT if http_timeout is None else http_timeout,
        )
        logger.debug(f"Loaded autocomplete config from environment (countries={config.countries}, "
                     f"radius={config.radius}, strict={config.strict})")
        return config.validate()

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from places_autocomplete.config import AutocompleteConfig, DEFAULT_RADIUS
from places_autocomplete.errors import InvalidConfigurationError
from places_autocomplete.session import SessionToken


@dataclass(frozen=True)
class SearchRequest:
    """One autocomplete query: the typed text plus the filters to send with it."""
    input: str
    session_token: SessionToken
    radius: int = DEFAULT_RADIUS
    countries: Tuple[str, ...] = ()
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    strict: bool = False

    def __post_init__(self):
        if (self.latitude is None) != (self.longitude is None):
            raise InvalidConfigurationError("latitude and longitude must be provided together")
        if self.latitude == 0.0 or self.longitude == 0.0:
            raise InvalidConfigurationError("Latitude & Longitude cannot be 0.0")

    @classmethod
    def from_config(cls, text: str, config: AutocompleteConfig, session_token: SessionToken) -> 'SearchRequest':
        return cls(
            input=text,
            session_token=session_token,
            radius=config.radius,
            countries=tuple(config.countries or ()),
            latitude=config.latitude,
            longitude=config.longitude,
            strict=config.strict,
        )

    @property
    def components(self) -> Optional[str]:
        """Country filter, any of the listed countries matches."""
        if not self.countries:
            return None
        return '|'.join(f"country:{country}" for country in self.countries)

    @property
    def location(self) -> Optional[str]:
        if self.latitude is None or self.longitude is None:
            return None
        return f"{self.latitude},{self.longitude}"

    def to_params(self, api_key: str) -> Dict[str, str]:
        params = {
            'input': self.input,
            'radius': str(self.radius),
            'sessiontoken': str(self.session_token),
            'strictbounds': 'true' if self.strict else 'false',
            'key': api_key,
            'components': self.components,
            'location': self.location,
        }

        # Remove None values from params
        return {k: v for k, v in params.items() if v is not None}

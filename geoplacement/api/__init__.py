"""Remote altitude data services.

The module provides:
- elevation_client: Google Maps Elevation web service (ground elevation)
- geoid_client: geoid undulation server
"""

from .elevation_client import ElevationLookupError, ElevationSample, GoogleElevationClient
from .geoid_client import GeoidClient

__all__ = ["ElevationLookupError", "ElevationSample", "GeoidClient", "GoogleElevationClient"]

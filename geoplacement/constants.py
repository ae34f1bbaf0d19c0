"""
Centralized configuration knobs and thresholds.
Change values here to tune behavior without touching the modules.
"""
import math

# Reference ellipsoid (WGS84)
WGS84_A: float = 6378137.0  # equatorial radius, meters
WGS84_F: float = 1.0 / 298.257223563

# Spherical readback used for coarse display only
SPHERICAL_EARTH_RADIUS_M: float = 6378137.0

# Orientation
NORMAL_SAMPLE_OFFSET_M: float = 100.0  # vertical step for the finite-difference up vector
ORIENTATION_STRATEGY: str = "tangent_frame"  # "tangent_frame" | "radial_axis_angle"
POLE_CROSS_NORM_MIN: float = 1e-9  # |polar x up| below this => degenerate tangent frame
EXPORT_UP_AXIS_CORRECTION_RAD: float = math.pi / 2  # quarter turn about +X for Y-up assets

# Elevation service (Google Maps Elevation web service)
ELEVATION_API_URL = "https://maps.googleapis.com/maps/api/elevation/json"
ELEVATION_MAX_LOCATIONS_PER_REQUEST: int = 512
ELEVATION_STATUS_OK = "OK"

# Geoid undulation service
GEOID_SERVER_URL = "https://jmbh.herbertnet.co.uk/geoid_server"

# Both services receive coordinates rounded to this many decimals
QUERY_COORD_DECIMALS: int = 6

# HTTP
HTTP_TIMEOUT_S: float = 30.0
HTTP_RETRIES: int = 0  # urllib3 Retry count for the service sessions
USER_AGENT = "scene-geoplacement/0.1"

# Default anchor (Mountain View, CA)
DEFAULT_ANCHOR = {
    "lat": 37.42365071290318,
    "lng": -122.09213813335974,
    "altitude": 0.0,
}

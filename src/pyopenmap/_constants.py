"""Internal constants shared across the library."""

GEOCODER_URL = "http://tinygeocoder.com/create-api.php"
JSONP_CALLBACK = "jsonp"
CONTAINER_PREFIX = "actualmap"

DEFAULT_ZOOM: float = 2
DEFAULT_MARKER_RADIUS: float = 14

# ------------------------------------------------------------------
# Projections
# ------------------------------------------------------------------

GEOGRAPHIC = "EPSG:4326"
SPHERICAL_MERCATOR = "EPSG:900913"

# ------------------------------------------------------------------
# Base layers
# ------------------------------------------------------------------

WORLDWIND_URL = "http://worldwind25.arc.nasa.gov/tile/tile.aspx"
WORLDWIND_MAX_RESOLUTION = 0.28125
WORLDWIND_TILE_SIZE: tuple[int, int] = (512, 512)
WORLDWIND_LEVEL_ZERO_DEGREES = 2.25
WORLDWIND_ZOOM_LEVELS = 4
ARCGIS_RELIEF_URL = "http://server.arcgisonline.com/ArcGIS/rest/services/USA_Topo_Maps/MapServer/export"

# ------------------------------------------------------------------
# Marker popups
# ------------------------------------------------------------------

POPUP_ID = "featurePopup"
POPUP_SIZE: tuple[int, int] = (120, 250)
POINT_LAYER_NAME = "Point Layer"

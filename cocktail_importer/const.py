"""Constants for the Cocktail Importer."""

# Environment variable names
ENV_API_KEY = "GEMINI_API_KEY"
ENV_MODEL = "COCKTAIL_IMPORTER_MODEL"

# Default values
DEFAULT_MODEL = "gemini-2.5-flash-lite"
DEFAULT_TIMEOUT = 30
DEFAULT_MAX_TEXT_LENGTH = 8000
DEFAULT_MAX_RESPONSE_SIZE = 5 * 1024 * 1024
DEFAULT_MAX_REDIRECTS = 5
DEFAULT_MAX_RETRIES = 3
DEFAULT_OUTPUT_DIR = "output"

# Minimum amount of scraped text worth sending to the model
MIN_TEXT_LENGTH = 100

# How close a decimal quantity must be to a table fraction to snap to it
FRACTION_TOLERANCE = 0.01

# Pitcher scaling
DEFAULT_PITCHER_OZ = 64.0
PITCHER_ROUNDING_OZ = 0.25

# Extraction methods reported by the import service
EXTRACTION_METHOD_JSONLD = "json-ld"
EXTRACTION_METHOD_AI = "ai"
EXTRACTION_METHOD_DIRECT = "direct"

"""Constants for the REST store."""

SPACES_ENDPOINT = "/parking-spaces"
SPACE_ENDPOINT = "/parking-spaces/{space_id}"
NEARBY_ENDPOINT = "/parking-spaces/nearby"

ENVELOPE_KEY = "data"

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "User-Agent": "pynearbyparking-rest",
}

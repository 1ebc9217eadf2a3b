# Request actions
ACTION_AUTO_RESERVE = "AUTO_RESERVE"
ACTION_CHECK_SLOTS = "CHECK_SLOTS"
ACTION_VIEW_RESERVATIONS = "VIEW_RESERVATIONS"
ACTION_CANCEL_RESERVATION = "CANCEL_RESERVATION"

ACTIONS = (
    ACTION_AUTO_RESERVE,
    ACTION_CHECK_SLOTS,
    ACTION_VIEW_RESERVATIONS,
    ACTION_CANCEL_RESERVATION,
)

# Request header carrying the shared secret
API_KEY_HEADER = "X-API-Key"

# Characters of the API key used as the rate-limit partition key
IDENTIFIER_PREFIX_LEN = 16

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, X-API-Key",
}

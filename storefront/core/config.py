import os

SESSION_SECRET = os.getenv("SESSION_SECRET", "change-me")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "change-me")
APP_TZ = os.getenv("APP_TZ", "America/Sao_Paulo")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AVAILABILITY_CACHE_TTL = float(os.getenv("AVAILABILITY_CACHE_TTL", "15"))
AVAILABILITY_CACHE_SIZE = int(os.getenv("AVAILABILITY_CACHE_SIZE", "1024"))

CLOSED_OUTSIDE_HOURS_REASON = "outside operating hours"
PAUSED_REASON = "paused"

WEEKDAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)
WEEKDAY_ALIASES = {
    "segunda": 0,
    "segunda-feira": 0,
    "terca": 1,
    "terca-feira": 1,
    "quarta": 2,
    "quarta-feira": 2,
    "quinta": 3,
    "quinta-feira": 3,
    "sexta": 4,
    "sexta-feira": 4,
    "sabado": 5,
    "domingo": 6,
}

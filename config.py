import os
import logging
from dotenv import load_dotenv
from flask import Flask

load_dotenv()

app = Flask(__name__)

HOST = os.environ.get("HOST", "127.0.0.1")
PORT = int(os.environ.get("PORT", "6571"))

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
app.logger.setLevel(LOG_LEVEL)

# Widget defaults
WEATHER_PROVIDER = os.environ.get("WEATHER_PROVIDER", "openweathermap")
DEFAULT_CITY = os.environ.get("DEFAULT_CITY", "Paris")
DEFAULT_UNITS = os.environ.get("DEFAULT_UNITS", "metric") # metric or imperial
USE_12_HOUR = os.environ.get("USE_12_HOUR", "0") == "1"
FORECAST_CARDS = int(os.environ.get("FORECAST_CARDS", "5"))

# Upstream HTTP calls
HTTP_ATTEMPTS = int(os.environ.get("HTTP_ATTEMPTS", "3"))
HTTP_TIMEOUT = int(os.environ.get("HTTP_TIMEOUT", "5")) # in seconds
USER_AGENT = "Weather Widget HTTP Service"

# API keys stay on the server
OPENWEATHER_API_KEY = os.environ.get("OPENWEATHER_API_KEY", "")
WEATHERAPI_KEY = os.environ.get("WEATHERAPI_KEY", "")
GOOGLE_API_KEY = os.environ.get("GOOGLE_API_KEY", "")

API_KEYS = {
    "openweathermap": OPENWEATHER_API_KEY,
    "weatherapi": WEATHERAPI_KEY,
}

# Optional: Enable proxy support if behind a reverse proxy
# from werkzeug.middleware.proxy_fix import ProxyFix
# app.wsgi_app = ProxyFix(
#     app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1
# )

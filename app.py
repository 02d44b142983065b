import logging

from dotenv import load_dotenv
load_dotenv()

from flask import Flask, request, jsonify
from flask_caching import Cache

from config import settings, load_google_credentials
from sheets import TranslationDocument
from translations import TranslationsService, TranslationsError, DEFAULT_NAMESPACE

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# ----------------------------------------------
# Flask
# ----------------------------------------------
app = Flask(__name__)
# Send Cyrillic etc. as-is instead of \uXXXX escapes
app.json.ensure_ascii = False

# ----------------------------------------------
# Caching
# ----------------------------------------------
# In-process only; entries expire TRANSLATIONS_CACHE_TTL seconds after they are written
cache = Cache(app, config={
    "CACHE_TYPE": "SimpleCache",
    "CACHE_DEFAULT_TIMEOUT": settings.TRANSLATIONS_CACHE_TTL,
})

# ----------------------------------------------
# Google Sheets
# ----------------------------------------------
# Raises ConfigurationError when a variable is missing, so the app never starts half-configured
google_credentials = load_google_credentials()
document = TranslationDocument(google_credentials)

translations_service = TranslationsService(cache, document, ttl=settings.TRANSLATIONS_CACHE_TTL)
logger.info("TranslationsService initialized successfully.")


# ----------------------------------------------
# CORS
# ----------------------------------------------
@app.after_request
def add_cors_headers(resp):
    resp.headers["Access-Control-Allow-Origin"] = settings.CORS_ORIGIN
    resp.headers["Access-Control-Allow-Methods"] = "GET,HEAD,PUT,PATCH,POST,DELETE"
    resp.headers["Access-Control-Allow-Credentials"] = "true"
    # Preflight: allow whatever headers the browser asked for
    requested = request.headers.get("Access-Control-Request-Headers")
    if requested:
        resp.headers["Access-Control-Allow-Headers"] = requested
        resp.headers["Vary"] = "Origin, Access-Control-Request-Headers"
    else:
        resp.headers["Vary"] = "Origin"
    return resp


# ============================================================
# HEALTH CHECKS
# ============================================================
@app.get("/healthz")
def health():
    return jsonify({"ok": True}), 200


# ============================================================
# TRANSLATIONS
# ============================================================
@app.get("/translations")
def get_translations():
    lang = request.args.get("lang")
    # No ns -> common translations
    ns = request.args.get("ns") or DEFAULT_NAMESPACE

    if not lang:
        return jsonify({"error": "Language parameter (lang) is required."}), 400

    try:
        translations = translations_service.get_translations(lang, ns)
    except TranslationsError as e:
        return jsonify({"error": str(e)}), 500

    return jsonify(translations)


# ============================================================
# ERROR PAGES
# ============================================================
@app.errorhandler(404)
def not_found(e):
    return jsonify({"error": "Not found"}), 404


@app.errorhandler(500)
def server_error(e):
    return jsonify({"error": "Internal server error"}), 500


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=settings.PORT)

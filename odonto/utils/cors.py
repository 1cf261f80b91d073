"""
Cross-origin access for the browser front end and the patient confirmation page
"""
from flask_cors import CORS

# Bearer tokens travel in a header, so no cookies or credentials are involved
ALLOWED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
ALLOWED_HEADERS = ["Content-Type", "Authorization"]
PREFLIGHT_MAX_AGE = 86400


def _origins(app):
    raw = app.config.get('CORS_ORIGINS', '*')
    if raw == '*':
        return '*'
    return [origin.strip() for origin in raw.split(',') if origin.strip()]


def init_cors(app):
    """Apply CORS to every route"""
    origins = _origins(app)
    CORS(app,
         resources={r"/*": {"origins": origins}},
         methods=ALLOWED_METHODS,
         allow_headers=ALLOWED_HEADERS,
         max_age=PREFLIGHT_MAX_AGE)

    app.logger.info("CORS enabled for %s", 'all origins' if origins == '*' else ', '.join(origins))

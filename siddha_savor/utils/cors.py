"""
CORS Configuration
"""

CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"]
CORS_ALLOW_HEADERS = [
    "Content-Type",
    "Authorization",
    "X-Requested-With",
    "Accept",
    "Origin",
]


def init_cors(app):
    """
    Initialize CORS for the API routes. CORS_ORIGINS is '*' or a
    comma-separated list of origins.
    """
    from flask_cors import CORS

    origins = app.config.get('CORS_ORIGINS', '*')
    if origins != '*':
        origins = [o.strip() for o in origins.split(',') if o.strip()]

    CORS(app,
         resources={r"/api/*": {"origins": origins}},
         methods=CORS_METHODS,
         allow_headers=CORS_ALLOW_HEADERS,
         supports_credentials=True,
         max_age=86400)

    app.logger.info("CORS enabled for origins: %s", origins)

from fastapi.middleware.cors import CORSMiddleware

def configure_cors(app, origins=None):
    origins = list(origins or [])
    # no CORS_ORIGINS configured: allow any origin, the site has no credentials
    if not origins:
        origins = ["*"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        max_age=86400,
    )

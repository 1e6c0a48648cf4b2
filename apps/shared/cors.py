"""Sentralisert CORS-konfigurasjon for blog-tjenesten."""

import os
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware


# Standard: alle origins tillatt
DEFAULT_ORIGINS = ["*"]


def get_allowed_origins() -> list[str]:
    """Hent liste over tillatte CORS origins fra miljøet."""
    raw = os.getenv("CORS_ORIGINS", "")
    origins = [origin.strip().rstrip("/") for origin in raw.split(",") if origin.strip()]
    if not origins:
        origins = list(DEFAULT_ORIGINS)

    # Legg til FRONTEND_URL fra env hvis satt
    frontend_url = os.getenv("FRONTEND_URL")
    if frontend_url and "*" not in origins:
        clean_url = frontend_url.rstrip("/")
        if clean_url not in origins:
            origins.append(clean_url)

    return origins


def setup_cors(app: FastAPI) -> None:
    """Legg til CORS-middleware på en FastAPI-app."""
    origins = get_allowed_origins()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Credentials kan ikke kombineres med wildcard
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

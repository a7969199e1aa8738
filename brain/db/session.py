# backend/brain/db/session.py

from fastapi import Request
from supabase import create_client, Client
from brain.core.config import settings
import logging

def create_supabase_client() -> Client:
    supabase_url = settings.SUPABASE_URL
    supabase_key = settings.SUPABASE_SERVICE_ROLE_KEY
    logging.info(f"Creating Supabase client with URL: {supabase_url}")
    return create_client(supabase_url, supabase_key)

def close_supabase_client(supabase: Client) -> None:
    logging.info("Closing Supabase client")
    supabase.postgrest.aclose()

def get_supabase(request: Request) -> Client:
    """Return the client owned by the running application (see lifespan in main)."""
    return request.app.state.supabase

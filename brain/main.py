import logging
import re
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from brain.api.v1.api import api_router
from brain.core.config import settings
from brain.db.session import create_supabase_client, close_supabase_client

logging.basicConfig(level=settings.LOG_LEVEL)

class SensitiveDataFilter(logging.Filter):
    patterns = [
        (re.compile(r"(bearer\s+)[^\s'\"]+", re.IGNORECASE), r"\1[REDACTED]"),
        (re.compile(r"(password['\"]?\s*[:=]\s*['\"]?)[^\s'\",}]+", re.IGNORECASE), r"\1[REDACTED]"),
        (re.compile(r"(authorization['\"]?\s*[:=]\s*['\"]?)[^'\",}]+", re.IGNORECASE), r"\1[REDACTED]"),
    ]

    def filter(self, record):
        record.msg = self.sanitize_message(record.getMessage())
        record.args = None
        return True

    def sanitize_message(self, message):
        for pattern, replacement in self.patterns:
            message = pattern.sub(replacement, message)
        return message

for handler in logging.getLogger().handlers:
    handler.addFilter(SensitiveDataFilter())

def sanitize_headers(headers):
    sanitized_headers = {k: (v[:10] + '...') if k.lower() == 'authorization' else v for k, v in headers.items()}
    return sanitized_headers

@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.supabase = create_supabase_client()
    yield
    close_supabase_client(app.state.supabase)

app = FastAPI(title="brain-backend", lifespan=lifespan)

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[str(origin).rstrip("/") for origin in settings.BACKEND_CORS_ORIGINS],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Middleware for Logging Requests and Responses
@app.middleware("http")
async def log_request(request: Request, call_next):
    logging.info(f"Received request: {request.method} {request.url.path}")
    logging.debug(f"Request headers: {sanitize_headers(request.headers)}")
    response = await call_next(request)
    logging.info(f"Response status code: {response.status_code}")
    return response

# Include API Router
app.include_router(api_router, prefix="/api/v1")

@app.get("/")
async def root():
    return {"message": "Welcome to the API"}

"""
AgentScope Provider Application Entry Point

FastAPI application serving the chat endpoint.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from agentscope_provider.api import chat_router
from agentscope_provider.common.errors import AgentScopeError
from agentscope_provider.config import get_settings
from agentscope_provider.logging_config import setup_logging

logger = logging.getLogger(__name__)

# Initialize logging configuration
setup_logging()

settings = get_settings()

app = FastAPI(
    title=settings.APP_NAME,
    description="Chat endpoint backed by an AgentScope runtime",
    version="0.1.0",
)

# Configure CORS
allowed_origins_str = settings.ALLOWED_ORIGINS.strip()
if allowed_origins_str:
    allowed_origins = [origin.strip() for origin in allowed_origins_str.split(",") if origin.strip()]
elif settings.DEBUG:
    allowed_origins = ["http://localhost:8081", "http://127.0.0.1:8081"]
else:
    allowed_origins = []

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Global Exception Handler
@app.exception_handler(AgentScopeError)
async def agentscope_error_handler(request: Request, exc: AgentScopeError):
    """
    Handle adapter exceptions

    In production mode, error details are hidden to prevent information leakage.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(include_details=get_settings().DEBUG),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle uncaught exceptions"""
    logger.error("Unhandled exception: %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "message": "Internal server error",
                "type": "internal_error",
                "code": "internal_error",
            }
        },
    )


app.include_router(chat_router)


@app.get("/health")
async def health_check():
    """Health check"""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "agentscope_provider.main:app",
        host="0.0.0.0",
        port=8001,
        reload=settings.DEBUG,
    )

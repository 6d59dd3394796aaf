"""
FastAPI app for CrewDispatch.

HTTP layer over the scheduling use cases. Run: python -m crewdispatch.api.main
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from crewdispatch.api.router import router
from crewdispatch.application.config import get_settings

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
)

app = FastAPI(
    title="CrewDispatch API",
    description="Technician scoring, crew auto-assignment and multi-day scheduling",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


@app.get("/")
def root():
    """Health check"""
    return {"message": "CrewDispatch API", "status": "ok"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)

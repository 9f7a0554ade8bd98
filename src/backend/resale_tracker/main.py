import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from resale_tracker.config import settings

logging.basicConfig(
    level="DEBUG" if settings.DEBUG else settings.LOG_LEVEL.upper(),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

app = FastAPI(
    title=f"{settings.APP_NAME} API",
    description="Resale inventory tracker with receipt OCR",
    version="0.1.0"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/")
async def root():
    return {
        "message": f"{settings.APP_NAME} API",
        "version": "0.1.0",
        "status": "running"
    }

@app.get("/health")
async def health_check():
    return {"status": "healthy"}

# Import routers
from resale_tracker.routers import scan, lots, sales, stats

# Include routers
app.include_router(scan.router)
app.include_router(lots.router)
app.include_router(sales.router)
app.include_router(stats.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("resale_tracker.main:app", host="0.0.0.0", port=8000)

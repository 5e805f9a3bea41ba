from fastapi import FastAPI
from api.routes.auth_routes import router as auth_router
from api.routes.provider_routes import router as provider_router
from utils.logger import logger
import uvicorn


# Create FastAPI app
app = FastAPI(
    title="Heroku Auth",
    description="Sign users in with their Heroku account",
    version="0.2.0",
    docs_url="/docs",
    redoc_url="/redoc"
)


# Include routers
app.include_router(auth_router, tags=["Authentication"])
app.include_router(provider_router, tags=["Providers"])

logger.info("Heroku Auth routes registered")


@app.get("/")
async def root():
    """Root endpoint"""
    return {"message": "Heroku Auth", "version": "0.2.0", "status": "running"}


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )

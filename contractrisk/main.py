from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from contractrisk.api import analysis
from contractrisk.core.config import settings

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="ContractRisk API",
    description="Contract Risk Analysis Engine",
    version=settings.API_VERSION,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Allow all origins for now
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(analysis.router, prefix="/api/analysis", tags=["analysis"])

@app.get("/", tags=["root"])
async def read_root():
    """Root endpoint providing API information."""
    return {
        "app": settings.APP_NAME,
        "description": "Contract Risk Analysis Engine",
        "version": settings.API_VERSION,
        "status": "operational"
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("contractrisk.main:app", host="0.0.0.0", port=8000, reload=True)

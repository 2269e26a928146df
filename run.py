#!/usr/bin/env python3
"""
Démarre l'API du journal KHEOPS avec uvicorn.
"""
import uvicorn
from app.core.config import settings

if __name__ == "__main__":
    # Le logging est configuré par app.main (setup_logging), pas par uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG and settings.ENVIRONMENT == "development",
        log_config=None,
        use_colors=False,
    )

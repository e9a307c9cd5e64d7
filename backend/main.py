"""
Development launcher: python main.py (from backend/).
"""
import uvicorn

from findoc.core.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "findoc.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )

# python -m helphood_chat
import uvicorn

from helphood_chat.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "helphood_chat.main:app",
        host=settings.APP_HOST,
        port=settings.APP_PORT,
        workers=settings.APP_WORKERS,
    )

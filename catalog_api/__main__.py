import uvicorn
from dotenv import load_dotenv

from catalog_api.config import get_settings


def main():
    load_dotenv()
    settings = get_settings()
    uvicorn.run(
        "catalog_api.main:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        reload=False,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()

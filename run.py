"""Quick start script for running the application"""
import uvicorn

from resource_api.core.config import settings


def main():
    """Run the FastAPI application"""
    print("=" * 60)
    print(settings.PROJECT_NAME)
    print("=" * 60)
    print("\nStarting server...")
    print(f"API will be available at: http://{settings.HOST}:{settings.PORT}{settings.API_PREFIX}/user")
    print(f"Interactive docs at: http://{settings.HOST}:{settings.PORT}/docs")
    print("\nPress CTRL+C to stop\n")

    uvicorn.run(
        "resource_api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.ENVIRONMENT == "local",
        log_level=settings.LOG_LEVEL.lower()
    )


if __name__ == "__main__":
    main()

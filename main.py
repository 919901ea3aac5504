from dotenv import load_dotenv

load_dotenv()

from app.config import settings  # noqa: E402
from app.server import create_input_app, create_temperature_app  # noqa: E402

# One image, two roles: APP_ROLE=input (service A) or APP_ROLE=temperature (service B)
if settings.APP_ROLE == "temperature":
    app = create_temperature_app(settings)
else:
    app = create_input_app(settings)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.APP_ENV == "dev",
        log_level="info"
    )

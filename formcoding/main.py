"""multipart-form-coding - multipart/form-data encoding and upload validation service."""

from robyn import Robyn

from formcoding.api.health import router as health_router
from formcoding.api.uploads import router as uploads_router
from formcoding.core.logger import LogIcon, logger
from formcoding.core.settings import settings as st
from formcoding.middlewares.base import MiddlewareHandler
from formcoding.middlewares.files import ConversionOpenAPIMiddleware

app = Robyn(__file__)

# Routers
app.include_router(health_router)
app.include_router(uploads_router)

# Middlewares
middlewares = MiddlewareHandler(app)
middlewares.register(ConversionOpenAPIMiddleware())


def main() -> None:
    logger.info("Starting %s | host=%s | port=%s", st.API_NAME, st.API_HOST, st.API_PORT, icon=LogIcon.START)
    app.start(host=st.API_HOST, port=st.API_PORT)


if __name__ == "__main__":
    main()

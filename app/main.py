import logging

from fastapi import FastAPI

from app.config import settings
from app.errors import register_exception_handlers
from app.routes.health import router as health_router
from app.routes.members import router as members_router
from app.routes.projects import router as projects_router
from app.routes.tasks import router as tasks_router
from app.routes.workspaces import router as workspaces_router

def configure_logging() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title="workspace-tracker", version="0.1.0")
    register_exception_handlers(app)
    app.include_router(health_router)
    app.include_router(workspaces_router)
    app.include_router(members_router)
    app.include_router(projects_router)
    app.include_router(tasks_router)
    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.app_host, port=settings.app_port)

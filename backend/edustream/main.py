import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .db import init_db
from .settings import settings
from .routers import ai, data, records

logger = logging.getLogger(__name__)

app = FastAPI(title="EduStream API")

# The portal UI is served from a different origin/port
app.add_middleware(
	CORSMiddleware,
	allow_origins=["*"],
	allow_methods=["*"],
	allow_headers=["*"],
)

app.include_router(data.router, prefix="/api")
app.include_router(records.students, prefix="/api")
app.include_router(records.teachers, prefix="/api")
app.include_router(records.courses, prefix="/api")
app.include_router(ai.router, prefix="/api")


@app.get("/info")
def info():
	return {"status": "ok", "geminiConfigured": settings.ai_configured}


@app.on_event("startup")
def startup_event():
	init_db()
	logger.info("AI engine: %s", "enabled" if settings.ai_configured else "simulated (no API key)")


def configure_logging(level: int = logging.INFO) -> None:
	logging.basicConfig(
		level=level,
		format="%(asctime)s %(levelname)s %(name)s: %(message)s",
	)


def run() -> None:
	import uvicorn

	configure_logging()
	uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
	run()

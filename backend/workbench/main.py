import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from workbench.config import settings
from workbench.routers import actions, ai, conversations, files, projects, python

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Workbench", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(projects.router)
app.include_router(files.router)
app.include_router(files.file_router)
app.include_router(conversations.router)
app.include_router(ai.router)
app.include_router(python.router)
app.include_router(actions.router)


@app.get("/health")
async def health():
    return {"status": "ok"}

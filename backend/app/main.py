from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.config import get_cors_origins, get_upload_dir
from routes import images, rooms, session_ws, uploads

app = FastAPI(title="Tabletop Session API", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(session_ws.router, prefix="/api")
app.include_router(rooms.router, prefix="/api")
app.include_router(uploads.router, prefix="/api")
app.include_router(images.router, prefix="/api")

app.mount("/uploads", StaticFiles(directory=get_upload_dir(), check_dir=False), name="uploads")


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}

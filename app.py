from dotenv import load_dotenv
load_dotenv()

import logging
import os
from pathlib import Path

from fastapi import Depends, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from routers.debug import router as debug_router
from services.annotations import AnnotationStore
from services.build import build_schedule
from services.sportsdb import masked_key

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

ROOT = Path(__file__).resolve().parent
PUBLIC_DIR = ROOT / "public"
ANNOTATIONS_PATH = os.getenv("ANNOTATIONS_PATH") or str(ROOT / "priorities.json")

app = FastAPI(title="Birka sport schedule")
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
app.include_router(debug_router)

app.state.annotations = AnnotationStore(ANNOTATIONS_PATH).load()
logger.info("Using TheSportsDB key: %s", masked_key())


def get_store(request: Request) -> AnnotationStore:
    return request.app.state.annotations


async def _json_body(request: Request) -> dict:
    """Lenient body parse: anything that isn't a JSON object reads as {}."""
    try:
        body = await request.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


# ---------- Schedule ----------

@app.get("/schedule")
def schedule(store: AnnotationStore = Depends(get_store)):
    try:
        return build_schedule(store)
    except Exception as e:
        logger.exception("schedule error")
        return JSONResponse(status_code=500, content={"error": str(e) or type(e).__name__})


# ---------- Annotations ----------

@app.post("/priorities/toggle")
async def toggle_priority(request: Request, store: AnnotationStore = Depends(get_store)):
    body = await _json_body(request)
    event_ids = await run_in_threadpool(store.toggle_priority, body.get("id"))
    if event_ids is None:
        return {"ok": False}
    return {"ok": True, "eventIds": event_ids}


@app.post("/tags/toggle")
async def toggle_tag(request: Request, store: AnnotationStore = Depends(get_store)):
    body = await _json_body(request)
    tags = await run_in_threadpool(store.toggle_tag, body.get("id"), body.get("tag"))
    if tags is None:
        return {"ok": False}
    return {"ok": True, "tagsForId": tags}


# Last: catches "/" and every other path not matched above.
app.mount("/", StaticFiles(directory=PUBLIC_DIR, html=True), name="public")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=os.getenv("HOST", "0.0.0.0"), port=int(os.getenv("PORT", "3000")))

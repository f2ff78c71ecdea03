from contextlib import asynccontextmanager
import logging
import os
import sys
from pathlib import Path

from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

load_dotenv(Path(ROOT_DIR) / ".env")

from backend import config
from backend.schemas import (
    ErrorResponse,
    ImageGenerateRequest,
    ImageGenerateResponse,
    ManifestEntry,
    MemoryUpdateRequest,
    MessageCreateRequest,
    MessageItem,
    SplitSamplesResponse,
    TrainingDataCreateRequest,
    TrainingDataItem,
    UploadSampleResponse,
    VoiceSamplesResponse,
)
from backend.services.image_client import ImageClient, ImageGenerationError
from backend.services.sample_upload import SampleUploadError, SampleUploadService
from backend.services.split_manager import SplitBusyError, SplitManager
from media.chunk_extractor import ChunkExtractor
from media.chunk_queue import ChunkQueue
from media.duration_probe import DurationProbe
from samples.scanner import SampleScanner
from samples.splitter import SplitOrchestrator, SplitPolicy
from storage.manifest_store import ManifestStore
from storage.message_store import MessageStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    os.makedirs(os.path.dirname(config.MANIFEST_DB_PATH) or ".", exist_ok=True)

    scanner = SampleScanner(directory=config.VOICE_SAMPLES_DIR)
    scanner.ensure_directory()

    manifest = ManifestStore(db_path=config.MANIFEST_DB_PATH)
    manifest.init_db()

    orchestrator = SplitOrchestrator(
        scanner=scanner,
        probe=DurationProbe(
            ffprobe_bin=config.FFPROBE_BIN,
            timeout=config.MEDIA_TOOL_TIMEOUT_SECONDS,
        ),
        queue=ChunkQueue(
            extractor=ChunkExtractor(
                ffmpeg_bin=config.FFMPEG_BIN,
                timeout=config.MEDIA_TOOL_TIMEOUT_SECONDS,
            ),
            workers=config.CHUNK_WORKERS,
        ),
        policy=SplitPolicy(
            max_chunk_seconds=config.MAX_CHUNK_SECONDS,
            size_threshold_mb=config.SIZE_THRESHOLD_MB,
        ),
        manifest=manifest,
    )

    message_store = MessageStore(path=config.MESSAGES_PATH)
    message_store.load()

    app.state.scanner = scanner
    app.state.manifest = manifest
    app.state.split_manager = SplitManager(orchestrator=orchestrator)
    app.state.upload_service = SampleUploadService(
        scanner=scanner,
        max_upload_bytes=int(config.MAX_UPLOAD_MB * 1024 * 1024),
    )
    app.state.message_store = message_store
    app.state.image_client = ImageClient(
        api_token=config.HF_API_TOKEN,
        model=config.HF_IMAGE_MODEL,
        request_timeout=config.IMAGE_REQUEST_TIMEOUT,
    )

    yield


app = FastAPI(title="Cyn API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1|[0-9]{1,3}(?:\.[0-9]{1,3}){3})(:[0-9]+)?$",
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/health")
def health() -> dict[str, bool]:
    return {"ok": True}


# --------------------
# Voice samples
# --------------------

@app.get("/api/tts/voices", response_model=VoiceSamplesResponse, response_model_exclude_none=True)
def list_voice_samples():
    scanner: SampleScanner = app.state.scanner
    try:
        samples = scanner.list_samples()
    except OSError as exc:
        logger.exception("Error listing voice samples")
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "samples": [],
                "directory": scanner.directory,
                "error": str(exc),
            },
        )

    return VoiceSamplesResponse(success=True, samples=samples, directory=scanner.directory)


@app.post(
    "/api/tts/split-samples",
    response_model=SplitSamplesResponse,
    response_model_exclude_none=True,
    responses={409: {"model": SplitSamplesResponse}},
)
def split_voice_samples():
    try:
        report = app.state.split_manager.run()
    except SplitBusyError as exc:
        return JSONResponse(status_code=409, content={"success": False, "error": str(exc)})

    return report.to_dict()


@app.post(
    "/api/tts/upload-sample",
    response_model=UploadSampleResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}},
)
def upload_voice_sample(audio: UploadFile = File(...)) -> UploadSampleResponse:
    try:
        stored = app.state.upload_service.save_upload(audio)
    except SampleUploadError as exc:
        raise HTTPException(
            status_code=400,
            detail={"code": "INVALID_UPLOAD", "message": str(exc)},
        ) from exc

    return UploadSampleResponse(success=True, file=stored, message="Voice sample uploaded")


@app.get("/api/tts/manifest", response_model=list[ManifestEntry])
def list_split_manifest() -> list[ManifestEntry]:
    return [ManifestEntry(**row) for row in app.state.manifest.list_entries()]


# --------------------
# Chat log
# --------------------

@app.get("/api/messages", response_model=list[MessageItem])
def list_messages() -> list[MessageItem]:
    return [MessageItem(**m) for m in app.state.message_store.list_messages()]


@app.post(
    "/api/messages",
    response_model=MessageItem,
    status_code=201,
    responses={400: {"model": ErrorResponse}},
)
def add_message(payload: MessageCreateRequest) -> MessageItem:
    try:
        message = app.state.message_store.add_message(
            content=payload.content,
            role=payload.role,
            metadata=payload.metadata,
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=400,
            detail={"code": "INVALID_MESSAGE", "message": str(exc)},
        ) from exc

    return MessageItem(**message)


@app.get("/api/training", response_model=list[TrainingDataItem])
def list_training_data() -> list[TrainingDataItem]:
    return [TrainingDataItem(**row) for row in app.state.message_store.list_training_data()]


@app.post(
    "/api/training",
    response_model=TrainingDataItem,
    status_code=201,
    responses={400: {"model": ErrorResponse}},
)
def add_training_data(payload: TrainingDataCreateRequest) -> TrainingDataItem:
    try:
        row = app.state.message_store.add_training_data(
            content=payload.content,
            category=payload.category,
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=400,
            detail={"code": "INVALID_TRAINING_DATA", "message": str(exc)},
        ) from exc

    return TrainingDataItem(**row)


@app.get("/api/memory")
def get_memory() -> dict:
    return app.state.message_store.get_memory()


@app.put("/api/memory/{key}", responses={400: {"model": ErrorResponse}})
def update_memory(key: str, payload: MemoryUpdateRequest) -> dict:
    try:
        app.state.message_store.update_memory(key, payload.value)
    except ValueError as exc:
        raise HTTPException(
            status_code=400,
            detail={"code": "INVALID_KEY", "message": str(exc)},
        ) from exc

    return app.state.message_store.get_memory()


# --------------------
# Image generation
# --------------------

@app.post(
    "/api/generate-image",
    response_model=ImageGenerateResponse,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
def generate_image(payload: ImageGenerateRequest) -> ImageGenerateResponse:
    client: ImageClient = app.state.image_client
    try:
        result = client.generate(payload.prompt)
    except ValueError as exc:
        raise HTTPException(
            status_code=400,
            detail={"code": "INVALID_PROMPT", "message": str(exc)},
        ) from exc
    except ImageGenerationError as exc:
        logger.warning("Image generation failed: %s", exc)
        raise HTTPException(
            status_code=502,
            detail={"code": "IMAGE_API_ERROR", "message": str(exc)},
        ) from exc

    return ImageGenerateResponse(
        success=True,
        imageUrl=result["image_url"],
        description=result["description"],
        message=f"Image generated with {client.model}",
    )

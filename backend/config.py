import os
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
DATA_DIR = Path(os.getenv("DATA_DIR", str(ROOT_DIR / "data")))

VOICE_SAMPLES_DIR = os.getenv(
    "VOICE_SAMPLES_DIR",
    str(ROOT_DIR / "training-data" / "voice-samples"),
)
MESSAGES_PATH = os.getenv("MESSAGES_PATH", str(DATA_DIR / "messages.json"))
MANIFEST_DB_PATH = os.getenv("MANIFEST_DB_PATH", str(DATA_DIR / "manifest.db"))

# 30s / 5MB and 60s / 8MB have both been used; either pair works.
MAX_CHUNK_SECONDS = float(os.getenv("MAX_CHUNK_SECONDS", "30"))
SIZE_THRESHOLD_MB = float(os.getenv("SIZE_THRESHOLD_MB", "5"))
CHUNK_WORKERS = int(os.getenv("CHUNK_WORKERS", "1"))

FFMPEG_BIN = os.getenv("FFMPEG_BIN", "ffmpeg")
FFPROBE_BIN = os.getenv("FFPROBE_BIN", "ffprobe")
MEDIA_TOOL_TIMEOUT_SECONDS = float(os.getenv("MEDIA_TOOL_TIMEOUT_SECONDS", "120"))

MAX_UPLOAD_MB = float(os.getenv("MAX_UPLOAD_MB", "50"))

HF_API_TOKEN = os.getenv("HF_API_TOKEN", "").strip()
HF_IMAGE_MODEL = os.getenv("HF_IMAGE_MODEL", "stabilityai/stable-diffusion-xl-base-1.0")
IMAGE_REQUEST_TIMEOUT = float(os.getenv("IMAGE_REQUEST_TIMEOUT", "120"))

from pathlib import Path
import argparse
import json
import logging
import sys

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

load_dotenv(ROOT_DIR / ".env")

from backend import config
from media.chunk_extractor import ChunkExtractor
from media.chunk_queue import ChunkQueue
from media.duration_probe import DurationProbe
from samples.scanner import SampleScanner
from samples.splitter import SplitOrchestrator, SplitPolicy
from storage.manifest_store import ManifestStore


def main():
    parser = argparse.ArgumentParser(description="Split oversized voice samples into chunks.")
    parser.add_argument("--dir", default=config.VOICE_SAMPLES_DIR, help="voice sample directory")
    parser.add_argument("--chunk-seconds", type=float, default=config.MAX_CHUNK_SECONDS)
    parser.add_argument("--size-mb", type=float, default=config.SIZE_THRESHOLD_MB)
    parser.add_argument("--workers", type=int, default=config.CHUNK_WORKERS)
    parser.add_argument("--no-manifest", action="store_true", help="skip the sqlite history")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    manifest = None
    if not args.no_manifest:
        Path(config.MANIFEST_DB_PATH).parent.mkdir(parents=True, exist_ok=True)
        manifest = ManifestStore(db_path=config.MANIFEST_DB_PATH)
        manifest.init_db()

    orchestrator = SplitOrchestrator(
        scanner=SampleScanner(directory=args.dir),
        probe=DurationProbe(ffprobe_bin=config.FFPROBE_BIN, timeout=config.MEDIA_TOOL_TIMEOUT_SECONDS),
        queue=ChunkQueue(
            extractor=ChunkExtractor(ffmpeg_bin=config.FFMPEG_BIN, timeout=config.MEDIA_TOOL_TIMEOUT_SECONDS),
            workers=args.workers,
        ),
        policy=SplitPolicy(max_chunk_seconds=args.chunk_seconds, size_threshold_mb=args.size_mb),
        manifest=manifest,
    )

    report = orchestrator.run()
    print(json.dumps(report.to_dict(), indent=2))
    return 0 if report.success or report.error is None else 1


if __name__ == "__main__":
    sys.exit(main())

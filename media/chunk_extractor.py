import os

from media.tool_runner import MediaToolError, run_tool
from samples.models import CHUNK_MARKER, ChunkJob


def chunk_name(source_name: str, index: int) -> str:
    base, ext = os.path.splitext(source_name)
    return f"{base}{CHUNK_MARKER}{index}{ext}"


class ChunkExtractor:
    def __init__(self, ffmpeg_bin: str = "ffmpeg", timeout: float = 120.0):
        self.ffmpeg_bin = ffmpeg_bin
        self.timeout = float(timeout)

    def extract(self, job: ChunkJob) -> str:
        if job.length_seconds <= 0:
            raise MediaToolError("length_seconds must be positive", path=job.source_path)

        cmd = [
            self.ffmpeg_bin,
            "-y",
            "-loglevel",
            "error",
            "-i",
            job.source_path,
            "-ss",
            f"{job.start_seconds:g}",
            "-t",
            f"{job.length_seconds:g}",
            "-c",
            "copy",
            job.output_path,
        ]

        try:
            run_tool(cmd, timeout=self.timeout, path=job.source_path)
            if not os.path.exists(job.output_path) or os.path.getsize(job.output_path) == 0:
                raise MediaToolError(
                    f"Extracted chunk {job.index} is missing or empty",
                    path=job.source_path,
                )
        except MediaToolError:
            if os.path.exists(job.output_path):
                os.remove(job.output_path)
            raise

        return job.output_path

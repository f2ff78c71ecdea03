import math
from pathlib import Path

from media.tool_runner import MediaToolError, run_tool


class DurationProbe:
    def __init__(self, ffprobe_bin: str = "ffprobe", timeout: float = 120.0):
        self.ffprobe_bin = ffprobe_bin
        self.timeout = float(timeout)

    def probe(self, path: str) -> float:
        src = Path(path)
        if not src.exists():
            raise MediaToolError(f"Voice sample not found: {path}", path=path)

        cmd = [
            self.ffprobe_bin,
            "-v",
            "error",
            "-show_entries",
            "format=duration",
            "-of",
            "default=noprint_wrappers=1:nokey=1",
            str(src),
        ]

        result = run_tool(cmd, timeout=self.timeout, path=path)
        return self.parse_duration(result.stdout, path=path)

    @staticmethod
    def parse_duration(output: str, path: str | None = None) -> float:
        raw = ""
        for line in (output or "").splitlines():
            candidate = line.strip()
            if candidate:
                raw = candidate
                break

        try:
            duration = float(raw)
        except ValueError as exc:
            raise MediaToolError(f"Unparseable duration output: {raw!r}", path=path) from exc

        if math.isnan(duration) or math.isinf(duration) or duration < 0:
            raise MediaToolError(f"Invalid duration: {raw!r}", path=path)

        return duration

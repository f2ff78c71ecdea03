import subprocess


class MediaToolError(RuntimeError):
    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


def run_tool(cmd: list[str], timeout: float, path: str | None = None) -> subprocess.CompletedProcess:
    """
    Run an external media tool and return the completed process.
    Any failure (missing binary, timeout, non-zero exit) becomes a MediaToolError.
    """
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
    except FileNotFoundError as exc:
        raise MediaToolError(f"{cmd[0]} not found", path=path) from exc
    except PermissionError as exc:
        raise MediaToolError(f"{cmd[0]} is not executable", path=path) from exc
    except subprocess.TimeoutExpired as exc:
        raise MediaToolError(f"{cmd[0]} timed out after {timeout:g}s", path=path) from exc

    if result.returncode != 0:
        message = (result.stderr or "").strip() or f"{cmd[0]} exited with code {result.returncode}"
        raise MediaToolError(message, path=path)

    return result

import json
import os
from datetime import datetime, timezone
from threading import Lock
from typing import Any


class MessageStore:
    """
    Chat messages, training snippets and persona memory for one app instance.

    Everything lives in memory. When `path` is given, messages are loaded
    from and rewritten to that JSON file.
    """

    def __init__(self, path: str | None = None):
        self.path = path
        self._messages: list[dict[str, Any]] = []
        self._training_data: list[dict[str, Any]] = []
        self._memory: dict[str, Any] = {}
        self._next_message_id = 1
        self._next_training_id = 1
        self._lock = Lock()

    def load(self) -> None:
        if not self.path or not os.path.exists(self.path):
            return

        with open(self.path, "r", encoding="utf-8") as f:
            try:
                rows = json.load(f)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Corrupt message file {self.path}: {exc}") from exc

        if not isinstance(rows, list):
            raise ValueError(f"Message file {self.path} must contain a JSON list")

        with self._lock:
            self._messages = [dict(r) for r in rows]
            ids = [r["id"] for r in self._messages if isinstance(r.get("id"), int)]
            self._next_message_id = max(ids, default=0) + 1

            # Older files used string ids; give those rows fresh integer ids.
            for message in self._messages:
                if not isinstance(message.get("id"), int):
                    message["id"] = self._next_message_id
                    self._next_message_id += 1
                message.setdefault("role", "user")
                message.setdefault("metadata", {})

    # ---------- MESSAGES ----------
    def list_messages(self) -> list[dict[str, Any]]:
        with self._lock:
            return sorted((dict(m) for m in self._messages), key=lambda m: m["timestamp"])

    def add_message(
        self,
        content: str,
        role: str = "user",
        metadata: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        if not content or not content.strip():
            raise ValueError("Content is required")

        with self._lock:
            message = {
                "id": self._next_message_id,
                "content": content,
                "role": role or "user",
                "metadata": dict(metadata or {}),
                "timestamp": self._utc_now_iso(),
            }
            self._next_message_id += 1
            self._messages.append(message)
            self._save()
            return dict(message)

    # ---------- TRAINING DATA ----------
    def list_training_data(self) -> list[dict[str, Any]]:
        with self._lock:
            return [dict(t) for t in self._training_data]

    def add_training_data(self, content: str, category: str) -> dict[str, Any]:
        if not content or not content.strip():
            raise ValueError("Content is required")
        if not category or not category.strip():
            raise ValueError("Category is required")

        with self._lock:
            row = {
                "id": self._next_training_id,
                "content": content,
                "category": category.strip(),
                "timestamp": self._utc_now_iso(),
            }
            self._next_training_id += 1
            self._training_data.append(row)
            return dict(row)

    # ---------- MEMORY ----------
    def get_memory(self) -> dict[str, Any]:
        with self._lock:
            return dict(self._memory)

    def update_memory(self, key: str, value: Any) -> None:
        key = key.strip()
        if not key:
            raise ValueError("key is required")
        with self._lock:
            self._memory[key] = value

    def _save(self) -> None:
        if not self.path:
            return

        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(self._messages, f, indent=2)
        os.replace(tmp_path, self.path)

    def _utc_now_iso(self) -> str:
        return datetime.now(timezone.utc).isoformat()

import base64
import json
import urllib.error
import urllib.request
from typing import Any


class ImageGenerationError(Exception):
    pass


class ImageClient:
    def __init__(
        self,
        api_token: str = "",
        model: str = "stabilityai/stable-diffusion-xl-base-1.0",
        request_timeout: float = 120.0,
    ):
        if not model:
            raise ValueError("HF_IMAGE_MODEL is required")

        self.api_token = api_token
        self.model = model
        self.request_timeout = request_timeout

    @property
    def endpoint(self) -> str:
        return f"https://api-inference.huggingface.co/models/{self.model}"

    def generate(self, prompt: str) -> dict[str, Any]:
        prompt = prompt.strip()
        if not prompt:
            raise ValueError("Prompt is required")

        payload = json.dumps(
            {
                "inputs": prompt,
                "options": {"wait_for_model": True},
            }
        ).encode("utf-8")

        headers = {"Content-Type": "application/json"}
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"

        req = urllib.request.Request(
            self.endpoint,
            data=payload,
            headers=headers,
            method="POST",
        )

        try:
            with urllib.request.urlopen(req, timeout=self.request_timeout) as resp:
                content_type = resp.headers.get("Content-Type", "image/jpeg").split(";")[0].strip()
                body = resp.read()
        except urllib.error.HTTPError as exc:
            raise ImageGenerationError(f"Hugging Face API returned {exc.code}") from exc
        except urllib.error.URLError as exc:
            raise ImageGenerationError(f"Hugging Face API unreachable: {exc.reason}") from exc

        if not content_type.startswith("image/"):
            raise ImageGenerationError(f"Unexpected response type: {content_type}")
        if not body:
            raise ImageGenerationError("Hugging Face API returned an empty image")

        encoded = base64.b64encode(body).decode("ascii")
        return {
            "image_url": f"data:{content_type};base64,{encoded}",
            "description": self.describe(prompt),
        }

    @staticmethod
    def describe(prompt: str) -> str:
        return prompt[:50] + "..."

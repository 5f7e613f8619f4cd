import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import httpx
from google import genai
from google.genai import types
from google.genai.errors import APIError

from ..errors import GenerationError

logger = logging.getLogger(__name__)


class GeminiClient:
    """Async client for Gemini API interactions.

    Constructed once by the caller and passed to the agent; holds no
    module-level state. Supports:
    - Vertex AI (service account)
    - Google AI API (API key)

    Calls are not retried here; the rewrite pipeline retries whole attempts.
    """

    VERTEX_REGION = "us-central1"

    def __init__(self, api_key: Optional[str] = None, service_account_file: Optional[str] = None):
        self.api_key = api_key or os.environ.get("GEMINI_API_KEY")
        self.service_account_file = service_account_file or os.environ.get("GEMINI_SERVICE_ACCOUNT_KEY_FILE")
        self._using_vertexai = False
        self._credentials = None
        self._project_id = None
        self.client = self._initialize_client()

    def _initialize_client(self) -> Optional[genai.Client]:
        """Initialize the GenAI client with preferred authentication.

        Priority:
        1. Vertex AI (if service account file exists)
        2. Google AI API (if GEMINI_API_KEY is set)
        """
        try:
            if self.service_account_file:
                resolved_path = Path(self.service_account_file).resolve()
                if resolved_path.exists():
                    import google.oauth2.service_account as sa
                    logger.info(f"Initializing Gemini with service account: {resolved_path}")
                    self._credentials = sa.Credentials.from_service_account_file(
                        str(resolved_path),
                        scopes=['https://www.googleapis.com/auth/cloud-platform']
                    )
                    self._project_id = self._credentials.project_id
                    self._using_vertexai = True
                    return genai.Client(
                        vertexai=True,
                        project=self._project_id,
                        location=self.VERTEX_REGION,
                        credentials=self._credentials
                    )
                else:
                    logger.warning(f"Service account file not found: {resolved_path}")

            if self.api_key:
                logger.info("Initializing Gemini with API key")
                self._using_vertexai = False
                return genai.Client(api_key=self.api_key)

            logger.error("No valid Gemini credentials found")
        except Exception as e:
            logger.error(f"Error initializing Gemini client: {e}")
        return None

    def is_using_vertexai(self) -> bool:
        """Check if the client is using Vertex AI authentication."""
        return self._using_vertexai

    def _require_client(self) -> genai.Client:
        if not self.client:
            raise GenerationError("Gemini client not initialized")
        return self.client

    async def generate_content(self, model: str, contents: Any, config: Optional[types.GenerateContentConfig] = None) -> Any:
        """Generate content; API and transport failures become GenerationError."""
        client = self._require_client()
        logger.info(f"Calling Gemini API (Model: {model})")
        try:
            return await client.aio.models.generate_content(
                model=model,
                contents=contents,
                config=config
            )
        except (APIError, httpx.HTTPError) as e:
            raise GenerationError(f"Gemini call failed ({model}): {e}") from e

    async def generate_text(self, model: str, prompt: str, temperature: Optional[float] = None) -> str:
        """Generate plain text. An empty response is an error."""
        config = types.GenerateContentConfig(temperature=temperature) if temperature is not None else None
        response = await self.generate_content(model, prompt, config)
        text = (response.text or "").strip()
        if not text:
            raise GenerationError(f"Empty response from {model}")
        return text

    async def generate_structured_output(self, model: str, prompt: str, schema: Dict, temperature: float = 1.0) -> Any:
        """Generate content expected to match a JSON schema and return it decoded."""
        config = types.GenerateContentConfig(
            response_mime_type="application/json",
            response_json_schema=schema,
            temperature=temperature,
        )
        response = await self.generate_content(model, prompt, config)
        try:
            return json.loads(response.text)
        except (TypeError, json.JSONDecodeError) as e:
            raise GenerationError(f"Malformed JSON from {model}: {e}") from e

    async def generate_grounded(self, model: str, prompt: str) -> Any:
        """Generate content with Google Search grounding; returns the raw response."""
        config = types.GenerateContentConfig(
            tools=[types.Tool(google_search=types.GoogleSearch())]
        )
        return await self.generate_content(model, prompt, config)

    async def generate_image(self, model: str, prompt: str, aspect_ratio: str = "16:9") -> bytes:
        """Generate one JPEG image and return its bytes."""
        client = self._require_client()
        logger.info(f"🎨 Generating image (Model: {model})")
        try:
            response = await client.aio.models.generate_images(
                model=model,
                prompt=prompt,
                config=types.GenerateImagesConfig(
                    number_of_images=1,
                    output_mime_type="image/jpeg",
                    aspect_ratio=aspect_ratio,
                )
            )
        except (APIError, httpx.HTTPError) as e:
            raise GenerationError(f"Image generation failed ({model}): {e}") from e

        images = response.generated_images or []
        if not images or not images[0].image or not images[0].image.image_bytes:
            raise GenerationError("No image data in response")
        logger.info("✅ Image generated")
        return images[0].image.image_bytes

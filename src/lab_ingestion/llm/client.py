# ============================================================================
# src/lab_ingestion/llm/client.py
# ============================================================================
"""
Structured Extraction Client

Sends a system instruction plus document content (text, or rendered page
images) to an OpenAI or Azure OpenAI chat model in JSON mode and parses
the reply into a dict.

- complete_json(): generic JSON call, raises ExtractionBackendError subclasses
- extract(): one extraction attempt, never raises for backend failures;
  returns a tagged ExtractionAttempt instead

No retries happen here. The orchestrator decides what to do with a
failed attempt.

Usage:
    client = StructuredExtractionClient()
    attempt = await client.extract(document_text, seed=12345)
    if attempt.ok:
        print(attempt.result.analyte_count)
"""

import asyncio
import json
import logging
import re
from typing import Any, Dict, List, Optional, Sequence, Union

from json_repair import repair_json

from ..config import llm_settings
from ..core.models import (
    AttemptError,
    ExtractionAttempt,
    PageImage,
    RawExtractionResult,
)
from ..utils.exceptions import (
    BackendUnavailableError,
    ModelEmptyResponseError,
    ResponseParseError,
)
from .prompts import EXTRACTION_SYSTEM_PROMPT, VISION_USER_PROMPT

logger = logging.getLogger(__name__)

_CODE_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*\n?(.*?)\n?\s*```$", re.DOTALL)
_JSON_OBJECT_RE = re.compile(r"(\{[\s\S]*\})")

# Raw model output kept in attempt diagnostics
_DETAIL_CHARS = 500

ExtractionContent = Union[str, Sequence[PageImage]]


class StructuredExtractionClient:
    """
    JSON-mode chat completion client for lab report extraction.

    The SDK client is created lazily from llm_settings; tests pass a fake
    object exposing chat.completions.create().
    """

    def __init__(
        self,
        client: Any = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        repair_json: Optional[bool] = None
    ):
        self._client = client
        self.model = model or (
            llm_settings.AZURE_OPENAI_CHAT_MODEL_DEPLOYMENT
            if llm_settings.use_azure else llm_settings.OPENAI_MODEL
        )
        self.temperature = llm_settings.LLM_TEMPERATURE if temperature is None else temperature
        self.max_tokens = max_tokens or llm_settings.LLM_MAX_TOKENS
        self.repair_json = llm_settings.LLM_REPAIR_JSON if repair_json is None else repair_json

    @property
    def client(self):
        """Lazy load the OpenAI (or Azure OpenAI) client."""
        if self._client is None:
            if llm_settings.use_azure:
                from openai import AzureOpenAI
                self._client = AzureOpenAI(
                    azure_endpoint=llm_settings.AZURE_OPENAI_ENDPOINT,
                    api_key=llm_settings.AZURE_OPENAI_API_KEY,
                    api_version=llm_settings.AZURE_OPENAI_API_VERSION
                )
                logger.info(
                    f"Azure OpenAI client initialized: endpoint={llm_settings.AZURE_OPENAI_ENDPOINT}, "
                    f"deployment={self.model}"
                )
            else:
                from openai import OpenAI
                self._client = OpenAI(
                    api_key=llm_settings.OPENAI_API_KEY,
                    base_url=llm_settings.OPENAI_BASE_URL
                )
                logger.info(f"OpenAI client initialized: model={self.model}")
        return self._client

    def is_configured(self) -> bool:
        """Check if credentials are available (or a client was injected)."""
        return bool(
            self._client is not None
            or llm_settings.use_azure
            or llm_settings.OPENAI_API_KEY
        )

    async def complete_json(
        self,
        system: str,
        user_content: Union[str, List[Dict[str, Any]]],
        seed: Optional[int] = None,
        temperature: Optional[float] = None
    ) -> Dict[str, Any]:
        """
        Run one JSON-mode chat completion.

        Args:
            system: System instruction
            user_content: Plain text, or a list of content parts (text/image_url)
            seed: Sampling seed (omitted when None)
            temperature: Overrides the client's default temperature

        Returns:
            The parsed JSON object

        Raises:
            BackendUnavailableError: the SDK call failed (network, auth, quota)
            ModelEmptyResponseError: the model returned no content
            ResponseParseError: the content is not a JSON object
        """
        if not self.is_configured():
            raise BackendUnavailableError(
                "LLM backend not configured",
                details="Set OPENAI_API_KEY or AZURE_OPENAI_ENDPOINT and AZURE_OPENAI_API_KEY"
            )

        request: Dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user_content},
            ],
            "response_format": {"type": "json_object"},
            "temperature": self.temperature if temperature is None else temperature,
            "max_tokens": self.max_tokens,
        }
        if seed is not None:
            request["seed"] = seed

        # Make API call (run in executor since openai client is sync)
        def call_api():
            response = self.client.chat.completions.create(**request)
            if not response.choices:
                return None
            return response.choices[0].message.content

        loop = asyncio.get_running_loop()
        try:
            response_text = await loop.run_in_executor(None, call_api)
        except Exception as e:
            logger.error(f"LLM call failed: {e}")
            raise BackendUnavailableError("LLM call failed", details=str(e)) from e

        if not response_text or not response_text.strip():
            raise ModelEmptyResponseError("Model returned an empty response")

        logger.debug(f"LLM response ({len(response_text)} chars): {response_text[:_DETAIL_CHARS]}")

        data = self._parse_json(response_text)
        if not isinstance(data, dict):
            raise ResponseParseError(
                "Model response is not a JSON object",
                details=response_text[:_DETAIL_CHARS]
            )
        return data

    async def extract(self, content: ExtractionContent, seed: Optional[int] = None) -> ExtractionAttempt:
        """
        One extraction attempt over document text or rendered pages.

        Returns:
            ExtractionAttempt carrying either the raw result or the failure
            kind with a diagnostic detail
        """
        if isinstance(content, str):
            user_content: Union[str, List[Dict[str, Any]]] = content
        else:
            user_content = self._build_image_content(content)

        try:
            data = await self.complete_json(EXTRACTION_SYSTEM_PROMPT, user_content, seed=seed)
        except BackendUnavailableError as e:
            return ExtractionAttempt.failure(AttemptError.BACKEND_CALL, e.details or e.message)
        except ModelEmptyResponseError as e:
            return ExtractionAttempt.failure(AttemptError.EMPTY_RESPONSE, e.details or e.message)
        except ResponseParseError as e:
            return ExtractionAttempt.failure(AttemptError.BACKEND_PARSE, e.details or e.message)

        return ExtractionAttempt.success(RawExtractionResult.from_dict(data))

    def _build_image_content(self, pages: Sequence[PageImage]) -> List[Dict[str, Any]]:
        content: List[Dict[str, Any]] = [{"type": "text", "text": VISION_USER_PROMPT}]
        for page in pages:
            content.append({
                "type": "image_url",
                "image_url": {
                    "url": page.data_url,
                    "detail": "high"
                }
            })
        return content

    def _parse_json(self, response: str) -> Optional[Any]:
        """
        Parse JSON from an LLM response.

        Order: strip code fences, direct parse, outermost {...} block,
        json_repair (when enabled). Returns None when nothing parses.
        """
        response = response.strip()

        fence_match = _CODE_FENCE_RE.match(response)
        if fence_match:
            response = fence_match.group(1).strip()

        try:
            return json.loads(response)
        except json.JSONDecodeError:
            pass

        json_match = _JSON_OBJECT_RE.search(response)
        if json_match:
            try:
                return json.loads(json_match.group(1))
            except json.JSONDecodeError:
                pass

        if self.repair_json:
            try:
                repaired = repair_json(response, return_objects=True)
                if isinstance(repaired, dict) and repaired:
                    return repaired
            except Exception as e:
                logger.debug(f"json_repair failed: {e}")

        logger.warning(f"Could not parse JSON from response: {response[:200]}")
        return None

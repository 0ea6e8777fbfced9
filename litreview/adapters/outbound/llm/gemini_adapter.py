"""Gemini adapter implementing the extraction port with the google-genai SDK."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from google import genai
from google.genai import errors, types

from ....core.domain import CardExtraction, ConsolidatedSummary
from ....core.domain.exceptions import (
    LLMConnectionError,
    LLMGenerationError,
    LLMRateLimitError,
    MissingAPIKeyError,
)
from ....core.ports.extraction_port import CredentialResolver, ExtractionPort
from ....core.services.json_repair import loads_lenient
from ....core.services.prompts import build_consolidation_prompt, build_extraction_prompt
from ...common.rate_limiter import AsyncRateLimiter

logger = logging.getLogger(__name__)

_STRING = types.Schema(type=types.Type.STRING)

EXTRACTION_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "source": _STRING,
        "topic": _STRING,
        "participantRole": _STRING,
        "evidenceType": _STRING,
        "keyFindings": _STRING,
        "usageDetails": _STRING,
        "summary": types.Schema(
            type=types.Type.STRING,
            description="Resumen integrador del documento (aprox. 150 palabras).",
        ),
        "conclusions": types.Schema(
            type=types.Type.STRING,
            description="Conclusiones finales, cierre o resultados determinantes del estudio.",
        ),
        "comparativeNotes": _STRING,
        "challengesOpportunities": _STRING,
        "contextualFactors": _STRING,
        "keyEvidence": _STRING,
        "suggestedTags": types.Schema(
            type=types.Type.ARRAY,
            items=_STRING,
            description="Exactamente de 4 a 5 etiquetas clave.",
        ),
    },
    required=[
        "source",
        "topic",
        "participantRole",
        "evidenceType",
        "keyFindings",
        "usageDetails",
        "summary",
        "conclusions",
        "comparativeNotes",
        "challengesOpportunities",
        "contextualFactors",
        "keyEvidence",
        "suggestedTags",
    ],
)

CONSOLIDATION_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={"topic": _STRING, "summary": _STRING, "conclusions": _STRING},
    required=["topic", "summary", "conclusions"],
)

RATE_LIMIT_CODES = {429}
AUTH_CODES = {401, 403}
RATE_LIMIT_HINTS = ("quota", "rate limit", "resource_exhausted")


class GeminiExtractionAdapter(ExtractionPort):
    """Structured extraction backed by Gemini JSON-schema responses.

    The API key is resolved on every request through ``resolve_credential``,
    so a rotated key is used on the next call without rebuilding the adapter.
    """

    def __init__(
        self,
        resolve_credential: CredentialResolver,
        model: str = "gemini-2.5-flash",
        temperature: float = 0.2,
        rate_limiter: AsyncRateLimiter | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            resolve_credential: Returns the current API key, or None if unset.
            model: Gemini model name.
            temperature: Sampling temperature for fragment extraction.
            rate_limiter: Optional limiter awaited before each request.
        """
        self.resolve_credential = resolve_credential
        self.model_name = model
        self.temperature = temperature
        self.rate_limiter = rate_limiter
        self._client: genai.Client | None = None
        self._client_key: str | None = None
        self._client_loop: asyncio.AbstractEventLoop | None = None

    def _get_client(self) -> genai.Client:
        """Return a client for the current key and the running event loop.

        The SDK's async transport keeps connections bound to the loop that
        opened them, so a new ``asyncio.run`` or a rotated key gets a fresh
        client and the previous one is released.
        """
        api_key = self.resolve_credential()
        if not api_key:
            raise MissingAPIKeyError(
                "La clave de API de Gemini no está configurada. "
                "Define GOOGLE_API_KEY en el entorno o en el archivo .env."
            )

        loop = asyncio.get_running_loop()
        if self._client is None or api_key != self._client_key or loop is not self._client_loop:
            self._client = genai.Client(api_key=api_key)
            self._client_key = api_key
            self._client_loop = loop
            logger.info(f"Gemini client initialized for model: {self.model_name}")
        return self._client

    async def extract_chunk(
        self, chunk_text: str, total_chunks: int, chunk_index: int
    ) -> CardExtraction:
        prompt = build_extraction_prompt(chunk_text, total_chunks, chunk_index)
        data = await self._generate_json(
            prompt,
            EXTRACTION_SCHEMA,
            temperature=self.temperature,
            stage=f"fragmento {chunk_index + 1}",
        )
        return CardExtraction.from_mapping(data)

    async def consolidate(self, partials: list[CardExtraction]) -> ConsolidatedSummary:
        prompt = build_consolidation_prompt(partials)
        data = await self._generate_json(prompt, CONSOLIDATION_SCHEMA, stage="consolidación")
        return ConsolidatedSummary.from_mapping(data)

    async def _generate_json(
        self,
        prompt: str,
        schema: types.Schema,
        *,
        stage: str,
        temperature: float | None = None,
    ) -> dict[str, Any]:
        """Run one schema-constrained request and parse its JSON object."""
        client = self._get_client()
        if self.rate_limiter:
            await self.rate_limiter.acquire()

        config = types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=schema,
            temperature=temperature,
        )

        try:
            response = await client.aio.models.generate_content(
                model=self.model_name,
                contents=prompt,
                config=config,
            )
        except errors.APIError as e:
            raise self._map_api_error(e, stage) from e

        text = (response.text or "").strip()
        if not text:
            raise LLMGenerationError(
                f"Gemini devolvió una respuesta vacía ({stage})",
                context={"model": self.model_name, "stage": stage},
            )

        try:
            data = loads_lenient(text)
        except json.JSONDecodeError as e:
            raise LLMGenerationError(
                f"La respuesta de Gemini no es JSON válido ({stage})",
                cause=e,
                context={"model": self.model_name, "stage": stage, "chars": len(text)},
            ) from e

        if not isinstance(data, dict):
            raise LLMGenerationError(
                f"Se esperaba un objeto JSON ({stage})",
                context={"model": self.model_name, "stage": stage, "type": type(data).__name__},
            )
        return data

    def _map_api_error(self, error: errors.APIError, stage: str) -> Exception:
        """Translate an SDK error into the domain's LLM error hierarchy."""
        context = {"model": self.model_name, "stage": stage, "status_code": error.code}
        message = str(error).lower()

        if error.code in RATE_LIMIT_CODES or any(hint in message for hint in RATE_LIMIT_HINTS):
            logger.warning(f"Gemini rate limit hit during {stage}")
            return LLMRateLimitError(
                "Se alcanzó el límite de solicitudes de Gemini. "
                "Espera un momento e inténtalo de nuevo.",
                cause=error,
                context=context,
            )
        if error.code in AUTH_CODES or isinstance(error, errors.ServerError):
            return LLMConnectionError(
                f"No se pudo conectar con Gemini: {error}", cause=error, context=context
            )
        return LLMGenerationError(f"Error de Gemini: {error}", cause=error, context=context)

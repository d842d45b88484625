# resume_ingest/services/common/llm_client.py
"""LLM client for OpenAI and Ollama: schema-constrained JSON chat, prompt loading,
and provider selection for the resume extractor."""
from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests
from openai import APIError, OpenAI

from resume_ingest.core.config import settings

logger = logging.getLogger("ai.llm")

SUPPORTED_PROVIDERS = ("openai", "ollama")


@dataclass
class _JSONResponse:
    """`.data` holds the parsed object, or an `__llm_error__` payload on failure."""
    data: Dict[str, Any]

    @property
    def error(self) -> Optional[str]:
        return self.data.get("__llm_error__")


# Default Ollama chat options
DEFAULT_CHAT_OPTIONS: Dict[str, Any] = {
    "temperature": 0,
    "seed": 7,
    "num_ctx": 8192,
    "num_predict": 4096,
}


def load_prompt(relative_path: str) -> str:
    """
    Load a prompt file from resume_ingest/prompts/<relative_path>, falling back to the
    basename directly under prompts/.
    """
    base = Path(__file__).resolve().parents[2] / "prompts"
    path = base / relative_path
    if not path.exists():
        path = base / Path(relative_path).name
    if not path.exists():
        raise FileNotFoundError(f"Prompt file not found: {relative_path} (under {base})")
    text = path.read_text(encoding="utf-8")
    logger.debug("Loaded prompt: %s (%d chars)", relative_path, len(text))
    return text


class LLMClient:
    """
    Provider wrapper around a single operation:
      - chat_json: JSON object output (.data dict), optionally constrained by a JSON schema.

    Credentials default to settings; pass `api_key=""` / `base_url=""` to build an
    explicitly unconfigured client.
    """

    def __init__(
        self,
        model: Optional[str] = None,
        provider: Optional[str] = None,
        *,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
    ):
        self.provider = (provider or settings.LLM_PROVIDER or "openai").lower()
        if self.provider not in SUPPORTED_PROVIDERS:
            raise ValueError(f"Unknown provider: {self.provider}")

        self._openai: Optional[OpenAI] = None
        if self.provider == "ollama":
            self.base_url = settings.OLLAMA_BASE_URL if base_url is None else base_url
            self.api_key = None
            self.model = model or settings.LLM_CHAT_MODEL or "llama3.2"
            self.default_options = DEFAULT_CHAT_OPTIONS.copy()
        else:
            self.base_url = None
            self.api_key = settings.OPENAI_API_KEY if api_key is None else api_key
            self.model = model or settings.OPENAI_MODEL
        logger.info("LLM client: provider=%s model=%s configured=%s", self.provider, self.model, self.is_configured)

    @property
    def is_configured(self) -> bool:
        if self.provider == "ollama":
            return bool(self.base_url)
        return bool(self.api_key)

    def chat_json(
        self,
        messages: List[Dict[str, str]],
        timeout: int = 60,
        *,
        json_schema: Optional[Dict[str, Any]] = None,
        schema_name: str = "response",
        max_tokens: Optional[int] = None,
    ) -> _JSONResponse:
        """Run a chat completion that must return a JSON object. Never raises."""
        if not self.is_configured:
            return _JSONResponse(data={"__llm_error__": f"{self.provider} credential not configured"})
        if self.provider == "ollama":
            return self._chat_json_ollama(messages, timeout, json_schema=json_schema)
        return self._chat_json_openai(
            messages, timeout, json_schema=json_schema, schema_name=schema_name, max_tokens=max_tokens
        )

    # ===== Ollama =====
    def _chat_json_ollama(
        self,
        messages: List[Dict[str, str]],
        timeout: int,
        *,
        json_schema: Optional[Dict[str, Any]] = None,
    ) -> _JSONResponse:
        try:
            payload = {
                "model": self.model,
                "messages": messages,
                "format": json_schema or "json",
                "stream": False,
                "options": self.default_options,
            }
            response = requests.post(f"{self.base_url.rstrip('/')}/api/chat", json=payload, timeout=timeout)
            response.raise_for_status()
            raw = response.json().get("message", {}).get("content", "").strip()
            return self._parse_reply(raw)
        except requests.RequestException as e:
            logger.error("Ollama chat_json error: %s", e)
            return _JSONResponse(data={"__llm_error__": str(e)})
        except Exception as e:
            logger.exception("Unexpected error in Ollama chat_json: %s", e)
            return _JSONResponse(data={"__llm_error__": str(e)})

    # ===== OpenAI =====
    def _client(self) -> OpenAI:
        if self._openai is None:
            self._openai = OpenAI(api_key=self.api_key)
            logger.info("OpenAI client initialized")
        return self._openai

    def _chat_json_openai(
        self,
        messages: List[Dict[str, str]],
        timeout: int,
        *,
        json_schema: Optional[Dict[str, Any]] = None,
        schema_name: str = "response",
        max_tokens: Optional[int] = None,
    ) -> _JSONResponse:
        try:
            if json_schema is not None:
                response_format: Dict[str, Any] = {
                    "type": "json_schema",
                    # non-strict: the model may omit optional fields
                    "json_schema": {"name": schema_name, "schema": json_schema, "strict": False},
                }
            else:
                response_format = {"type": "json_object"}
            kwargs: Dict[str, Any] = {
                "model": self.model,
                "messages": messages,
                "response_format": response_format,
                "temperature": 0,
                "timeout": timeout,
            }
            if max_tokens is not None:
                kwargs["max_tokens"] = max_tokens
            resp = self._client().chat.completions.create(**kwargs)
            raw = (resp.choices[0].message.content or "").strip()
            return self._parse_reply(raw)
        except APIError as e:
            logger.error("OpenAI API error in chat_json: %s", e)
            return _JSONResponse(data={"__llm_error__": str(e)})
        except Exception as e:
            logger.exception("Unexpected error in OpenAI chat_json: %s", e)
            return _JSONResponse(data={"__llm_error__": str(e)})

    def _parse_reply(self, raw: str) -> _JSONResponse:
        if not raw:
            return _JSONResponse(data={"__llm_error__": "empty response"})
        try:
            data = self._coerce_json(raw)
        except json.JSONDecodeError as je:
            logger.error("JSON decode failed; returning error payload")
            return _JSONResponse(data={"__llm_error__": f"json_decode_error: {je}", "__raw_preview__": raw[:1200]})
        logger.debug("%s chat_json parsed keys: %s", self.provider, list(data.keys()))
        return _JSONResponse(data=data)

    @staticmethod
    def _coerce_json(text: str) -> Dict[str, Any]:
        """Best-effort JSON object parser for model replies.

        Tolerates markdown code fences, commentary around the object, and a
        single-element list wrapping the object.
        """
        s = (text or "").strip()
        s = re.sub(r"^\s*```(?:json)?\s*", "", s, flags=re.IGNORECASE)
        s = re.sub(r"\s*```\s*$", "", s).strip()
        if not s:
            return {}

        def as_object(obj: Any) -> Optional[Dict[str, Any]]:
            if isinstance(obj, dict):
                return obj
            if isinstance(obj, list) and len(obj) == 1 and isinstance(obj[0], dict):
                return obj[0]
            return None

        try:
            found = as_object(json.loads(s))
            if found is not None:
                return found
        except json.JSONDecodeError:
            pass

        # first balanced {...}, ignoring braces inside strings
        start = s.find("{")
        if start != -1:
            depth, in_string, escape = 0, False, False
            for i in range(start, len(s)):
                ch = s[i]
                if in_string:
                    if escape:
                        escape = False
                    elif ch == "\\":
                        escape = True
                    elif ch == '"':
                        in_string = False
                elif ch == '"':
                    in_string = True
                elif ch == "{":
                    depth += 1
                elif ch == "}":
                    depth -= 1
                    if depth == 0:
                        found = as_object(json.loads(s[start: i + 1]))
                        if found is not None:
                            return found
                        break

        raise json.JSONDecodeError("Expected JSON object", s, 0)


@lru_cache(maxsize=1)
def get_llm_client() -> LLMClient:
    """Process-wide client built from settings; also the FastAPI dependency."""
    return LLMClient()

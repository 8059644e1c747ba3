# -*- coding: utf-8 -*-
"""AI text-generation service (OpenAI-compatible chat completions).

The diet-plan generator and the food/exercise search fall back to this module
when they need an estimate the local database cannot provide.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Optional

import httpx

from .config import settings

logger = logging.getLogger(__name__)

_FENCE_OPEN = re.compile(r"```(?:json)?\s*", flags=re.IGNORECASE)


class AgentError(RuntimeError):
    """The AI provider could not be reached or returned an unusable reply."""


def resolve_agent_settings() -> Dict[str, Any]:
    if not settings.ai_api_key:
        raise AgentError("FITFUSION_AI_API_KEY not set")
    return {
        "model": settings.ai_model,
        "base_url": settings.ai_base_url,
        "api_key": settings.ai_api_key,
        "timeout": settings.ai_timeout,
        "temperature": settings.ai_temperature,
        "max_tokens": settings.ai_max_tokens,
    }


def call_agent(messages: List[Dict[str, str]]) -> Dict[str, Any]:
    cfg = resolve_agent_settings()
    base_url = cfg["base_url"].rstrip("/")
    if base_url.endswith("/chat/completions"):
        url = base_url
    else:
        url = f"{base_url}/chat/completions"
    payload = {
        "model": cfg["model"],
        "messages": messages,
        "temperature": cfg["temperature"],
        "max_tokens": cfg["max_tokens"],
    }
    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {cfg['api_key']}",
    }
    try:
        with httpx.Client(timeout=cfg["timeout"]) as client:
            resp = client.post(url, headers=headers, json=payload)
            resp.raise_for_status()
            return resp.json()
    except httpx.HTTPStatusError as exc:
        raise AgentError(f"Agent API error: {exc.response.status_code}") from exc
    except httpx.HTTPError as exc:
        raise AgentError(f"Agent API unreachable: {exc}") from exc
    except ValueError as exc:
        raise AgentError("Agent API returned non-JSON response") from exc


def complete_text(prompt: str, *, system_prompt: Optional[str] = None) -> str:
    """Send a single prompt and return the assistant's text content."""
    messages: List[Dict[str, str]] = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})
    messages.append({"role": "user", "content": prompt})

    result = call_agent(messages)
    try:
        content = result["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as exc:
        raise AgentError("Agent API response missing message content") from exc
    if not isinstance(content, str):
        raise AgentError("Agent API response content is not text")
    return content


def strip_code_fences(text: str) -> str:
    cleaned = _FENCE_OPEN.sub("", text or "")
    return cleaned.replace("```", "").strip()


def parse_json_reply(text: str) -> Any:
    """Strip markdown fences from a model reply and decode it as JSON.

    Raises ``ValueError`` (``json.JSONDecodeError``) on malformed output.
    """
    cleaned = strip_code_fences(text)
    try:
        return json.loads(cleaned)
    except ValueError:
        logger.warning("AI reply is not valid JSON: %.200s", cleaned)
        raise

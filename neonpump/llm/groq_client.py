from __future__ import annotations

import copy
import json
import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from groq import Groq

from neonpump.config import Settings, get_settings

logger = logging.getLogger(__name__)


class LLMError(RuntimeError):
    pass


class LLMConfigurationError(LLMError):
    """Raised before any network attempt when the client cannot be configured."""


# Telemetry for the "AI Insight" panel
LAST_USED_MODEL: Optional[str] = None
LAST_REQUEST: Optional[Dict[str, Any]] = None
LAST_RESPONSE_TEXT: Optional[str] = None


def _harden_schema_for_groq(schema: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively set additionalProperties=false on all object schemas.
    This helps satisfy providers that require closed objects for JSON Schema outputs.
    """
    def visit(node: Any) -> Any:
        if isinstance(node, dict):
            for k in ("allOf", "anyOf", "oneOf"):
                if k in node and isinstance(node[k], list):
                    node[k] = [visit(x) for x in node[k]]
            props = node.get("properties")
            if isinstance(props, dict):
                for pk, pv in list(props.items()):
                    props[pk] = visit(pv)
            if "items" in node:
                it = node["items"]
                if isinstance(it, list):
                    node["items"] = [visit(x) for x in it]
                else:
                    node["items"] = visit(it)
            for defs_key in ("$defs", "definitions"):
                if defs_key in node and isinstance(node[defs_key], dict):
                    for dk, dv in list(node[defs_key].items()):
                        node[defs_key][dk] = visit(dv)
            if node.get("type") == "object" or isinstance(props, dict):
                node["additionalProperties"] = False
        elif isinstance(node, list):
            return [visit(x) for x in node]
        return node

    return visit(copy.deepcopy(schema))


def chat_json(
    *,
    schema: Dict[str, Any],
    system: str,
    user: str,
    temperature: float | None = None,
    settings: Settings | None = None,
    client: Any = None,
) -> Dict[str, Any]:
    """Single-model Groq call returning the decoded JSON object.

    Uses exactly GROQ_MODEL; no aliasing or fallback models. `client` may be
    any object exposing `chat.completions.create` (tests pass a fake).
    """
    global LAST_USED_MODEL, LAST_REQUEST, LAST_RESPONSE_TEXT

    settings = settings or get_settings()
    if not settings.GROQ_API_KEY:
        raise LLMConfigurationError("GROQ_API_KEY is not set; cannot perform LLM call.")
    if not settings.GROQ_MODEL:
        raise LLMConfigurationError("GROQ_MODEL is not set; cannot perform LLM call.")

    if client is None:
        client = Groq(api_key=settings.GROQ_API_KEY)
    temp = settings.GROQ_TEMPERATURE if temperature is None else temperature
    requested_model = settings.GROQ_MODEL.strip()

    response_format = {
        "type": "json_schema",
        "json_schema": {
            "name": "workout_plan",
            "schema": _harden_schema_for_groq(schema),
            "strict": True,
        },
    }

    messages = [
        {"role": "system", "content": system},
        {"role": "user", "content": user},
    ]

    LAST_USED_MODEL = requested_model
    LAST_REQUEST = {
        "ts": datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S"),
        "system": system,
        "user": user,
    }
    LAST_RESPONSE_TEXT = None

    # Simple retry for transient errors (e.g., intermittent 5xx)
    last_error: Optional[str] = None
    for attempt in range(2):
        try:
            resp = client.chat.completions.create(
                model=requested_model,
                messages=messages,
                temperature=temp,
                response_format=response_format,
            )
            content = resp.choices[0].message.content
            LAST_RESPONSE_TEXT = content
            if not content:
                raise LLMError("Empty response content from LLM.")
            return json.loads(content)
        except Exception as e:  # noqa: PERF203
            last_error = str(e)
            if attempt == 0:
                logger.info("LLM call failed, retrying once: %s", last_error)
                time.sleep(0.5)
                continue
            raise LLMError(f"LLM call failed (model='{requested_model}'): {last_error}") from e
    return {}

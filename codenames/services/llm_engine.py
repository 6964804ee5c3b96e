"""
Service: llm_engine.py
- Centralises the calls to the text generator (an LLM) used for board words and
  spymaster hints.
- `LLMClient`: HTTP transport (retries, timeouts, correlation ids in logs).
- `TextGenerator`: the capability the game services depend on.
- `LLMTextGenerator`: prompts + response decoding over `LLMClient`.

The generator only returns *untrusted* data; shape and content validation is the
job of the board generator and the hint advisor.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Optional, Protocol, Tuple
from uuid import uuid4

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from codenames.config.settings import settings
from codenames.models.hint import HintContext, WordRequest

logger = logging.getLogger(__name__)

DEFAULT_CHAT_TIMEOUT: Tuple[float, float] = (settings.LLM_CONNECT_TIMEOUT, settings.LLM_READ_TIMEOUT)

PROVIDER_OPENAI = "openai"
PROVIDER_OLLAMA = "ollama"

_FENCE_RE = re.compile(r"^\s*```(?:json)?\s*(.*?)\s*```\s*$", re.DOTALL | re.IGNORECASE)


class LLMServiceError(RuntimeError):
    """Failure while talking to the LLM or decoding its answer."""


class LLMClient:
    """
    Centralised HTTP client for the LLM.
    - Retries with exponential backoff on 429/5xx.
    - Sends the API key as a bearer token when one is configured.
    - Logs every request with a correlation id.
    """

    def __init__(
        self,
        chat_endpoint: str,
        *,
        api_key: str = "",
        session: Optional[requests.Session] = None,
        chat_timeout: Tuple[float, float] = DEFAULT_CHAT_TIMEOUT,
    ) -> None:
        self.chat_endpoint = chat_endpoint
        self.session = session or self._build_session()
        if api_key:
            self.session.headers["Authorization"] = f"Bearer {api_key}"
        self.chat_timeout = chat_timeout

    @staticmethod
    def _build_session() -> requests.Session:
        session = requests.Session()
        retry = Retry(
            total=3,
            # no retry after a read timeout
            read=0,
            backoff_factor=0.5,
            status_forcelist=(429, 500, 502, 503, 504),
            allowed_methods=frozenset({"POST"}),
            respect_retry_after_header=True,
        )
        adapter = HTTPAdapter(max_retries=retry)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    def _post(
        self,
        url: str,
        payload: Dict[str, Any],
        *,
        timeout: Tuple[float, float],
        request_id: str,
    ) -> requests.Response:
        try:
            logger.debug(
                "LLM request start",
                extra={"llm_url": url, "llm_request_id": request_id},
            )
            response = self.session.post(url, json=payload, timeout=timeout)
            response.raise_for_status()
            return response
        except requests.Timeout as exc:
            logger.warning(
                "LLM request timeout",
                extra={"llm_url": url, "llm_request_id": request_id},
            )
            raise LLMServiceError("LLM request timed out") from exc
        except requests.RequestException as exc:
            logger.error(
                "LLM request failed",
                exc_info=True,
                extra={"llm_url": url, "llm_request_id": request_id},
            )
            raise LLMServiceError("LLM request failed") from exc

    def chat(self, payload: Dict[str, Any], *, request_id: str) -> Dict[str, Any]:
        response = self._post(
            self.chat_endpoint,
            payload,
            timeout=self.chat_timeout,
            request_id=request_id,
        )
        try:
            data = response.json()
        except ValueError as exc:
            logger.error(
                "Invalid JSON payload from LLM chat",
                exc_info=True,
                extra={"llm_request_id": request_id},
            )
            raise LLMServiceError("Invalid JSON payload from LLM chat") from exc
        logger.debug("LLM chat success", extra={"llm_request_id": request_id})
        return data


class TextGenerator(Protocol):
    """Word/hint generator used by the game services."""

    def generate_words(self, request: WordRequest) -> List[Any]:
        ...

    def generate_hint(self, context: HintContext) -> Dict[str, Any]:
        ...


WORDS_PROMPT = (
    "Return exactly {count} unique and interesting one-word entries that a 12th grader "
    "could understand, suitable for a Codenames board. Lowercase ASCII only, no spaces, "
    "no proper nouns. Return a JSON object with a single key 'words' whose value is the "
    "array of words."
)

HINT_SYSTEM_PROMPT = (
    "You are the spymaster in a game of Codenames. "
    "Give ONE clue word and the number of your team's words it relates to. "
    "The clue must be a single word and must NOT be any word currently on the board. "
    "Prefer a safe clue for fewer words over a risky clue for many: never lead towards "
    "the assassin, then avoid the opponent's words, then the neutral words. "
    'Answer with a JSON object: {"clue": "<word>", "count": <integer>, "targets": ["<word>", ...]}.'
)


def _hint_user_prompt(context: HintContext) -> str:
    return (
        f"You are the spymaster for the {context.team.value} team.\n"
        f"Board words (forbidden as clues): {', '.join(context.board_words)}\n"
        f"Your team's words: {', '.join(context.my_words)}\n"
        f"Opponent's words: {', '.join(context.opponent_words)}\n"
        f"Neutral words: {', '.join(context.neutral_words)}\n"
        f"The assassin is: {context.assassin or '(already revealed)'}\n"
        "Return JSON."
    )


def _extract_content(data: Any) -> str:
    """Assistant text for both shapes: OpenAI `choices[0].message` and Ollama `message`."""
    if not isinstance(data, dict):
        raise LLMServiceError("Unexpected LLM answer shape")
    choices = data.get("choices")
    if choices is not None:
        if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
            raise LLMServiceError("Unexpected LLM answer shape")
        message = choices[0].get("message")
    else:
        message = data.get("message")

    if message is None:
        content = data.get("response", "")
    elif isinstance(message, dict):
        content = message.get("content", "")
    else:
        raise LLMServiceError("Unexpected LLM answer shape")

    if content is None:
        return ""
    if not isinstance(content, str):
        raise LLMServiceError("Unexpected LLM answer shape")
    return content


def _parse_json_object(text: str) -> Dict[str, Any]:
    """Decode the JSON object in `text`, tolerating a Markdown code fence around it."""
    match = _FENCE_RE.match(text)
    if match:
        text = match.group(1)
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise LLMServiceError("LLM answer is not valid JSON") from exc
    if not isinstance(payload, dict):
        raise LLMServiceError("LLM answer is not a JSON object")
    return payload


class LLMTextGenerator:
    """`TextGenerator` backed by a chat endpoint (OpenAI compatible or Ollama)."""

    def __init__(
        self,
        client: LLMClient,
        *,
        provider: str = PROVIDER_OPENAI,
        words_model: str = settings.LLM_WORDS_MODEL,
        hint_model: str = settings.LLM_HINT_MODEL,
        hint_temperature: float = settings.LLM_HINT_TEMPERATURE,
    ) -> None:
        self.client = client
        self.provider = provider
        self.words_model = words_model
        self.hint_model = hint_model
        self.hint_temperature = hint_temperature

    def _payload(self, model: str, messages: List[Dict[str, str]], temperature: float) -> Dict[str, Any]:
        if self.provider == PROVIDER_OLLAMA:
            return {
                "model": model,
                "messages": messages,
                "format": "json",
                "options": {"temperature": temperature},
                "stream": False,
            }
        return {
            "model": model,
            "messages": messages,
            "temperature": temperature,
            "response_format": {"type": "json_object"},
        }

    def _ask(self, model: str, messages: List[Dict[str, str]], temperature: float, kind: str) -> Dict[str, Any]:
        request_id = f"{kind}-{uuid4().hex}"
        data = self.client.chat(self._payload(model, messages, temperature), request_id=request_id)
        content = _extract_content(data)
        if not content.strip():
            logger.error("Empty answer from LLM", extra={"llm_request_id": request_id, "kind": kind})
            raise LLMServiceError("Empty answer from LLM")
        payload = _parse_json_object(content)
        logger.info("LLM answer decoded", extra={"llm_request_id": request_id, "kind": kind})
        return payload

    def generate_words(self, request: WordRequest) -> List[Any]:
        messages = [{"role": "user", "content": WORDS_PROMPT.format(count=request.count)}]
        payload = self._ask(self.words_model, messages, request.temperature, "words")
        words = payload.get("words")
        if not isinstance(words, list):
            raise LLMServiceError("LLM answer has no 'words' array")
        return words

    def generate_hint(self, context: HintContext) -> Dict[str, Any]:
        messages = [
            {"role": "system", "content": HINT_SYSTEM_PROMPT},
            {"role": "user", "content": _hint_user_prompt(context)},
        ]
        return self._ask(self.hint_model, messages, self.hint_temperature, "hint")


CLIENT = LLMClient(settings.LLM_ENDPOINT, api_key=settings.LLM_API_KEY)
GENERATOR = LLMTextGenerator(CLIENT, provider=settings.LLM_PROVIDER.strip().lower())

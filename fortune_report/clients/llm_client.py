import logging
from typing import Any, Dict

import aiohttp

from ..core.config import Settings
from ..core.errors import ConfigError, UpstreamError

logger = logging.getLogger(__name__)


def _chat_content(data: Dict[str, Any]) -> str:
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return ""
    first = choices[0]
    if not isinstance(first, dict):
        return ""
    message = first.get("message")
    if not isinstance(message, dict):
        return ""
    content = message.get("content")
    return content if isinstance(content, str) else ""


def _responses_output(data: Dict[str, Any]) -> str:
    output = data.get("output")
    if not isinstance(output, list):
        return ""
    texts = []
    for item in output:
        if not isinstance(item, dict):
            continue
        for part in item.get("content") or []:
            if isinstance(part, dict) and part.get("type") == "output_text" and isinstance(part.get("text"), str):
                texts.append(part["text"])
    return "".join(texts)


def extract_generated_text(data: Any) -> str:
    """
    Normalize an upstream response body to a single string.

    Tries ``output_text`` first, then ``choices[0].message.content``, then
    the raw Responses API ``output[*].content[*].text`` list. Returns ``""``
    when none of them carry text.
    """
    if not isinstance(data, dict):
        return ""
    output_text = data.get("output_text")
    if isinstance(output_text, str) and output_text.strip():
        return output_text.strip()
    for extractor in (_chat_content, _responses_output):
        text = extractor(data)
        if text.strip():
            return text.strip()
    return ""


class GenerationClient:
    """One-shot client for an OpenAI-compatible text-generation endpoint."""

    def __init__(self, settings: Settings, session: aiohttp.ClientSession, system_prompt: str):
        self.settings = settings
        self.session = session
        self.system_prompt = system_prompt

    @property
    def endpoint(self) -> str:
        path = "responses" if self.settings.openai_api_style == "responses" else "chat/completions"
        return f"{self.settings.openai_api_base_url}/{path}"

    def build_payload(self, prompt: str) -> Dict[str, Any]:
        if self.settings.openai_api_style == "responses":
            return {
                "model": self.settings.openai_model,
                "instructions": self.system_prompt,
                "input": prompt,
                "max_output_tokens": self.settings.openai_max_tokens,
                "temperature": self.settings.openai_temperature,
            }
        return {
            "model": self.settings.openai_model,
            "messages": [
                {"role": "system", "content": self.system_prompt},
                {"role": "user", "content": prompt},
            ],
            "max_tokens": self.settings.openai_max_tokens,
            "temperature": self.settings.openai_temperature,
        }

    async def generate(self, prompt: str) -> str:
        api_key = self.settings.openai_api_key.get_secret_value() if self.settings.openai_api_key else ""
        if not api_key:
            raise ConfigError("Missing OPENAI_API_KEY environment variable.")

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        }
        payload = self.build_payload(prompt)
        logger.debug(f"Calling {self.endpoint} with model {self.settings.openai_model}")

        async with self.session.post(self.endpoint, json=payload, headers=headers) as response:
            if response.status < 200 or response.status >= 300:
                body = await response.text()
                logger.error(f"Generation API error: {response.status} {body}")
                raise UpstreamError(response.status, body)
            data = await response.json(content_type=None)

        return extract_generated_text(data)

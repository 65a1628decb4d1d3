"""
LLM client (completion oracle) for LegalScore.

Wraps an OpenAI-compatible chat completions endpoint and exposes:
- generate_completion(prompt, max_tokens) -> text
- complete(prompt, schema_description, max_tokens) -> parsed JSON

Every call is a single best-effort request. Upstream errors and unparsable
responses raise OracleFailure; nothing is retried here.
"""

import os
import re
import json
import asyncio
import logging
from dataclasses import dataclass
from functools import partial
from typing import Any, Optional

import openai
from dotenv import load_dotenv

from config_manager import get_config, get_llm_gate, get_model_name
from errors import OracleFailure

# Load environment variables
load_dotenv()

# Setup logging
logger = logging.getLogger(__name__)

DEFAULT_API_KEY_ENV = "LEGAL_LLM_API_KEY"

STRUCTURED_SUFFIX = """

Please respond with valid JSON that follows this schema:
{schema}

Response:"""

_FENCED_JSON = re.compile(r'```(?:json)?\s*(.*?)\s*```', re.DOTALL)


@dataclass
class LLMConfig:
    """Connection and sampling settings for the completion endpoint"""
    api_base: str
    api_key: str
    model: str
    timeout: int = 60
    temperature: float = 0.3
    top_p: float = 0.9


def parse_json_response(text: str) -> Any:
    """
    Parse a model response as JSON.

    Accepts bare JSON, JSON inside a markdown code fence, or JSON surrounded
    by prose (first '{' to last '}').

    Raises:
        OracleFailure: no valid JSON could be recovered
    """
    candidate = (text or "").strip()
    if not candidate:
        raise OracleFailure("Failed to parse LLM response as JSON: empty response")

    match = _FENCED_JSON.search(candidate)
    if match:
        candidate = match.group(1)
    elif not candidate.startswith(('{', '[')):
        start, end = candidate.find('{'), candidate.rfind('}')
        if start != -1 and end > start:
            candidate = candidate[start:end + 1]

    try:
        return json.loads(candidate)
    except json.JSONDecodeError as e:
        raise OracleFailure(f"Failed to parse LLM response as JSON: {e}") from e


async def gather_all(*coros) -> list:
    """
    Run oracle calls concurrently and return their results in order.

    The first failure cancels the calls still in flight and is re-raised.
    """
    tasks = [asyncio.ensure_future(coro) for coro in coros]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            if not task.done():
                task.cancel()
        # settle cancelled siblings so their exceptions are retrieved
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


class LLMClient:
    """Completion oracle backed by an OpenAI-compatible endpoint"""

    def __init__(self, config: Optional[LLMConfig] = None, client=None, model_type: str = "evaluator"):
        """
        Initialize the client.

        Args:
            config: Connection settings. If None, loads from config.yaml + environment.
            client: Pre-built OpenAI client (tests inject a fake here)
            model_type: Section under `models.` to read sampling settings from
        """
        self.config = config or self._load_config_from_yaml(model_type)
        self.client = client or self._init_openai_client()
        logger.info(f"LLMClient initialized with model: {self.config.model}")

    def _load_config_from_yaml(self, model_type: str) -> LLMConfig:
        """Load configuration from YAML config file; the API key stays in the environment"""
        cfg = get_config()
        api_base = cfg.get('external_services.llm.api_base')
        key_env = cfg.get('external_services.llm.api_key_env', DEFAULT_API_KEY_ENV)
        api_key = os.getenv(key_env)

        if not all([api_base, api_key]):
            missing = [k for k, v in {
                "external_services.llm.api_base": api_base,
                key_env: api_key,
            }.items() if not v]
            raise ValueError(f"Missing required LLM settings: {missing}")

        return LLMConfig(
            api_base=api_base,
            api_key=api_key,
            model=get_model_name(model_type),
            timeout=cfg.get_timeout('llm_request'),
            temperature=cfg.get(f'models.{model_type}.temperature', 0.3),
            top_p=cfg.get(f'models.{model_type}.top_p', 0.9),
        )

    def _init_openai_client(self) -> openai.OpenAI:
        """Initialize OpenAI client with configuration"""
        return openai.OpenAI(
            api_key=self.config.api_key,
            base_url=self.config.api_base,
            timeout=self.config.timeout,
            max_retries=0,
        )

    async def generate_completion(self, prompt: str, max_tokens: int = 2000) -> str:
        """Send one user prompt and return the stripped text of the first choice"""
        request = partial(
            self.client.chat.completions.create,
            model=self.config.model,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=max_tokens,
            temperature=self.config.temperature,
            top_p=self.config.top_p,
        )

        try:
            async with get_llm_gate():
                # Run the blocking SDK call in the default thread pool
                loop = asyncio.get_running_loop()
                response = await loop.run_in_executor(None, request)
        except openai.APIStatusError as e:
            logger.error(f"LLM API error {e.status_code}: {e.message}")
            raise OracleFailure(f"LLM API Error: {e.status_code} - {e.message}", status_code=e.status_code) from e
        except openai.OpenAIError as e:
            logger.error(f"LLM request failed: {e}")
            raise OracleFailure(f"LLM API Error: {e}") from e

        if not response.choices:
            raise OracleFailure("LLM API Error: response has no choices")

        choice = response.choices[0]
        if getattr(choice, "finish_reason", None) == "length":
            logger.warning(f"LLM response truncated at max_tokens={max_tokens}")

        content = choice.message.content
        if not content:
            raise OracleFailure("LLM API Error: empty completion")
        return content.strip()

    async def complete(self, prompt: str, schema_description: str, max_tokens: int = 2000) -> Any:
        """Ask for JSON matching `schema_description` and return it parsed"""
        structured_prompt = prompt + STRUCTURED_SUFFIX.format(schema=schema_description)
        text = await self.generate_completion(structured_prompt, max_tokens)
        return parse_json_response(text)

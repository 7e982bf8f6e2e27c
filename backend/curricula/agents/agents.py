from __future__ import annotations
from typing import Any, Dict, List, Literal, Optional, Protocol, Sequence
from dataclasses import dataclass
import json
import logging
import re

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from curricula.exceptions import UpstreamError
from curricula.models import ResourceType

# ---------- Logging ----------
def get_logger(name: str = "curricula.agents") -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger

log = get_logger()

# ---------- Constants & Prompts ----------
DISCOVERY_MODEL = "sonar"
EXTRACTION_MODEL = "gpt-4o-mini"
MAX_PAGE_CHARS = 12000

SuggestedCategory = Literal[
    "Productivity",
    "Software Development",
    "Wellness",
    "Business",
    "Finance",
    "Design",
]

DISCOVERY_SYSTEM_PROMPT = """You are a research assistant for a curated directory of educational resources (books, courses, YouTube series, podcasts, articles and cohort programs).
You search the web and only report resources you can verify exist. You never invent titles, creators or URLs."""

DISCOVERY_PROMPT = """Find 10 high-quality educational resources about: {topic}

Guidelines:
- Only include resources that actually exist and are currently available
- Prefer primary sources (official course pages, publisher sites) over aggregators
- Include a mix of free and paid resources
- Focus on quality over quantity
- Prefer high-quality, indie creators over mainstream ones when possible
- Prefer resources that are sold directly by the creator over resources that are sold through a third party
- Avoid resources that are too sales-y or marketing-heavy
- For books, use publisher or Amazon links
- For courses, use official platform links
- Provide accurate pricing when possible"""

EXTRACTION_SYSTEM_PROMPT = """You extract structured metadata about a single educational resource from the text of its web page.
Be accurate and conservative: use only what the page says."""

EXTRACTION_PROMPT = """Extract information about this educational resource from the following page content.

URL: {url}

Page Content:
{content}

Based on this content, extract the resource metadata. Be accurate about pricing - look for actual prices mentioned (e.g. 'Free', '$49', '$199/year', or 'Unknown'). For type, determine if this is a book, course, YouTube series, podcast, article, or cohort-based program."""


# ---------- Schemas ----------
class _AgentModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExtractedResource(_AgentModel):
    title: str = Field(..., min_length=1, description="The name of the resource")
    description: str = Field("", description="A 2-3 sentence description of what this resource offers")
    type: ResourceType = Field(..., description="The type of educational resource")
    price: str = Field("Unknown", description="Price like 'Free', '$49', '$199/year', or 'Unknown'")
    creator_name: str = Field(..., min_length=1, description="Person or organization who created this")
    creator_url: Optional[str] = Field(None, description="URL to creator's main website if mentioned")
    suggested_category: SuggestedCategory
    suggested_tags: List[str] = []


class DiscoveredResource(ExtractedResource):
    url: str = Field(..., min_length=1, description="Direct URL to the resource")


class DiscoveryResult(_AgentModel):
    resources: List[DiscoveredResource] = []


class ExtractedCandidate(ExtractedResource):
    """An extracted resource together with the page it came from."""
    url: str
    image_url: Optional[str] = None


# ---------- Utilities ----------
def strip_code_fences(text: str) -> str:
    s = text.strip()
    if s.startswith("```"):
        lines = [ln for ln in s.splitlines() if not ln.strip().startswith("```")]
        return "\n".join(lines).strip()
    return s

def parse_json_or_raise(text: str) -> Dict[str, Any]:
    """Parse JSON from text, handling markdown code fences and providing better error messages."""
    if not text:
        raise ValueError("Empty response from model")

    # First try direct JSON parse
    try:
        return json.loads(text)
    except json.JSONDecodeError as e1:
        # Try stripping code fences and parse again
        cleaned = strip_code_fences(text)
        try:
            return json.loads(cleaned)
        except json.JSONDecodeError as e2:
            # Try to extract JSON from a markdown code block surrounded by prose
            json_match = re.search(r'```(?:json)?\n(.*?)\n```', text, re.DOTALL)
            if json_match:
                try:
                    return json.loads(json_match.group(1))
                except json.JSONDecodeError as e3:
                    log.error(f"Failed to parse JSON after markdown extraction: {e3}")
                    log.debug(f"Problematic text: {text}")
                    raise ValueError(f"Invalid JSON in markdown code block: {e3}") from e3

            log.error(f"Failed to parse JSON. First error: {e1}, Second error: {e2}")
            log.debug(f"Problematic text: {text}")
            raise ValueError(f"Invalid JSON response. Please ensure the response is valid JSON. Error: {e2}")

def schema_instruction(model: type[BaseModel]) -> str:
    schema_str = json.dumps(model.model_json_schema(by_alias=True), indent=2)
    return f"Return ONLY valid JSON matching this exact schema (no extra text, no markdown):\n{schema_str}"

# ---------- LLM Client Interface ----------
class ChatLLM(Protocol):
    def chat(self, *, model: str, messages: Sequence[Dict[str, str]], temperature: float = 0.2) -> str: ...

# Concrete OpenAI implementation (also serves OpenAI-compatible APIs such as Perplexity)
class OpenAIChat(ChatLLM):
    def __init__(self, api_key: str, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = timeout
        self._client = None

    def _get_client(self):
        # Built on first use so a missing key surfaces as an upstream failure
        if self._client is None:
            from openai import OpenAI
            self._client = OpenAI(api_key=self._api_key, base_url=self._base_url, timeout=self._timeout)
        return self._client

    def chat(self, *, model: str, messages: Sequence[Dict[str, str]], temperature: float = 0.2) -> str:
        resp = self._get_client().chat.completions.create(model=model, messages=messages, temperature=temperature)
        return resp.choices[0].message.content


# ---------- High-level tasks ----------
@dataclass
class DiscoveryService:
    llm: ChatLLM
    model: str = DISCOVERY_MODEL

    def run(self, topic: str) -> List[DiscoveredResource]:
        messages = [
            {"role": "system", "content": DISCOVERY_SYSTEM_PROMPT},
            {"role": "user", "content": f"{DISCOVERY_PROMPT.format(topic=topic)}\n\n{schema_instruction(DiscoveryResult)}"},
        ]
        try:
            content = self.llm.chat(model=self.model, messages=messages, temperature=0.2)
            payload = parse_json_or_raise(content)
            result = DiscoveryResult.model_validate(payload)
        except ValidationError as ve:
            log.error(f"Discovery JSON failed validation for topic '{topic}': {ve}")
            raise UpstreamError("Failed to discover resources") from ve
        except Exception as e:
            log.error(f"Discovery error for topic '{topic}': {e}", exc_info=True)
            raise UpstreamError("Failed to discover resources") from e

        log.info(f"Discovered {len(result.resources)} resources for topic '{topic}'")
        return result.resources

@dataclass
class ExtractionService:
    llm: ChatLLM
    model: str = EXTRACTION_MODEL

    def run(self, url: str, page_markdown: str, image_url: Optional[str] = None) -> ExtractedCandidate:
        content = page_markdown[:MAX_PAGE_CHARS]
        messages = [
            {"role": "system", "content": EXTRACTION_SYSTEM_PROMPT},
            {"role": "user", "content": f"{EXTRACTION_PROMPT.format(url=url, content=content)}\n\n{schema_instruction(ExtractedResource)}"},
        ]
        try:
            raw = self.llm.chat(model=self.model, messages=messages, temperature=0.1)
            payload = parse_json_or_raise(raw)
            extracted = ExtractedResource.model_validate(payload)
        except ValidationError as ve:
            log.error(f"Extraction JSON failed validation for {url}: {ve}")
            raise UpstreamError("Failed to extract from URL") from ve
        except Exception as e:
            log.error(f"Extraction error for {url}: {e}", exc_info=True)
            raise UpstreamError("Failed to extract from URL") from e

        return ExtractedCandidate(**extracted.model_dump(), url=url, image_url=image_url)

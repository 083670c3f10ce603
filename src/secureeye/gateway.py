"""Gateway to the external AI assistant.

Each call is stateless: the caller supplies the finding and the analyst's
question, and the gateway builds a self-contained prompt around them. The
gateway never raises past its boundary; callers always get reply text back.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from openai import AsyncOpenAI
from pydantic_ai import Agent
from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers.openai import OpenAIProvider

from secureeye.config import Settings, get_settings
from secureeye.models import Vulnerability

logger = logging.getLogger(__name__)


OFFLINE_MESSAGE = "AI Assistant is offline. Please configure your API key."

COMMUNICATION_FAILURE_MESSAGE = (
    "An error occurred while communicating with the AI assistant. "
    "Please check the logs for details."
)

# System prompt that defines the assistant's persona and output format
SYSTEM_PROMPT = """You are SecureEye AI, a world-class cybersecurity analyst assistant.
Your purpose is to help cybersecurity professionals analyze, understand, and remediate vulnerabilities.
Provide clear, concise, and actionable advice. Format your responses using Markdown for readability."""


@dataclass(frozen=True)
class GatewayReply:
    """Outcome of a single assistant call."""

    text: str
    """Reply text, the offline notice, or the communication failure notice."""

    ok: bool = True
    """False only when the call was attempted and failed."""


def build_prompt(vulnerability: Vulnerability, query: str) -> str:
    """Build the context block sent to the assistant for one question."""
    return (
        "Vulnerability Details:\n"
        f"- Title: {vulnerability.title}\n"
        f"- Severity: {vulnerability.severity.value}\n"
        f"- Asset: (ID: {vulnerability.asset_id})\n"
        f"- Description: {vulnerability.description}\n"
        "\n"
        f"User Query: {query}"
    )


def build_agent(settings: Settings) -> Agent[None, str]:
    """Build the pydantic-ai agent backing the gateway.

    Args:
        settings: Settings carrying the API key and model name

    Returns:
        Agent producing plain-text replies
    """
    provider = OpenAIProvider(openai_client=AsyncOpenAI(api_key=settings.OPENAI_API_KEY))
    model = OpenAIChatModel(settings.LLM_MODEL_NAME, provider=provider)

    agent = Agent(
        model,
        output_type=str,
        system_prompt=SYSTEM_PROMPT,
    )

    logger.info(f"Built assistant agent with model: {settings.LLM_MODEL_NAME}")
    return agent


class AssistantGateway:
    """Single-call adapter between an analysis session and the assistant."""

    def __init__(self, settings: Optional[Settings] = None, agent: Optional[Agent] = None):
        """Initialize the gateway.

        Args:
            settings: Application settings (defaults to get_settings())
            agent: Pre-built agent; built lazily from settings when omitted
        """
        self.settings = settings or get_settings()
        self._agent = agent
        self._offline_warned = False

    @property
    def configured(self) -> bool:
        """Whether the assistant can be reached at all."""
        return self._agent is not None or self.settings.assistant_configured

    def get_agent(self) -> Agent[None, str]:
        """Return the agent, building it on first use."""
        if self._agent is None:
            self._agent = build_agent(self.settings)
        return self._agent

    async def ask(self, vulnerability: Vulnerability, query: str) -> GatewayReply:
        """Ask the assistant about a vulnerability.

        The query is assumed to be non-blank; callers validate it.

        Args:
            vulnerability: The finding under analysis
            query: The analyst's question

        Returns:
            GatewayReply with the assistant's text, the offline notice, or
            the communication failure notice (``ok=False``)
        """
        if not self.configured:
            if not self._offline_warned:
                logger.warning("OPENAI_API_KEY not set; assistant is running in offline mode")
                self._offline_warned = True
            return GatewayReply(text=OFFLINE_MESSAGE)

        prompt = build_prompt(vulnerability, query)
        logger.info(f"Querying assistant about {vulnerability.id}: {query[:100]}")

        try:
            result = await self.get_agent().run(prompt)
        except Exception as e:
            logger.error(f"Error calling assistant for {vulnerability.id}: {e}")
            return GatewayReply(text=COMMUNICATION_FAILURE_MESSAGE, ok=False)

        logger.info(f"Assistant replied for {vulnerability.id}")
        return GatewayReply(text=result.output)

    async def query(self, vulnerability: Vulnerability, query: str) -> str:
        """Ask the assistant and return only the reply text."""
        reply = await self.ask(vulnerability, query)
        return reply.text

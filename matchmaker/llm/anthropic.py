"""Anthropic Claude provider (Messages API)."""

import logging

from matchmaker.llm.base import DEFAULT_MAX_TOKENS, LLMProvider

logger = logging.getLogger(__name__)

# The Messages API has no JSON mode; starting the assistant turn with "{"
# makes the model continue a JSON object.
_JSON_PREFILL = "{"


class AnthropicProvider(LLMProvider):
    """LLM provider using the Anthropic Messages API."""

    @property
    def provider_id(self) -> str:
        return "anthropic"

    @property
    def default_model(self) -> str:
        return "claude-3-5-haiku-20241022"

    @property
    def env_var(self) -> str | None:
        return "ANTHROPIC_API_KEY"

    def complete(
        self,
        prompt: str,
        *,
        system: str,
        model: str | None = None,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        json_output: bool = False,
    ) -> str:
        api_key = self.api_key()
        try:
            import anthropic
        except ImportError:
            msg = (
                "anthropic is required for this provider. "
                "Install with: pip install 'matchmaker[anthropic]'"
            )
            raise ImportError(msg) from None

        messages = [{"role": "user", "content": prompt}]
        if json_output:
            messages.append({"role": "assistant", "content": _JSON_PREFILL})

        use_model = model or self.default_model
        logger.debug("anthropic completion (%s, max_tokens=%d, json=%s)", use_model, max_tokens, json_output)
        message = anthropic.Anthropic(api_key=api_key).messages.create(
            model=use_model,
            max_tokens=max_tokens,
            system=system,
            messages=messages,
        )

        text = "".join(block.text for block in message.content if block.type == "text")
        return _JSON_PREFILL + text if json_output else text

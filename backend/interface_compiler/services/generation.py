"""Natural-language to UI schema generation.

Generated schemas are returned to the caller only; persisting one is a
separate create call.
"""
import logging
from typing import Any, Optional

from interface_compiler.config import settings
from interface_compiler.errors import InvalidInput
from interface_compiler.services.llm_base import BaseLLMProvider, create_llm_provider
from interface_compiler.services.response_parser import parse_components

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a UI schema generator for a dynamic interface compiler. Convert natural language descriptions into JSON schemas for React components.

Supported component types:
1. "form" - Interactive forms with validation
2. "text" - Text content (headings, paragraphs)
3. "image" - Images with various properties

Component Schemas:

FORM:
{
  "type": "form",
  "fields": [
    {
      "label": "Field Label",
      "type": "text|email|number|textarea|select",
      "required": true|false,
      "placeholder": "Optional placeholder",
      "min": number (for number/date fields),
      "max": number (for number/date fields),
      "rows": number (for textarea),
      "options": [{"label": "Option 1", "value": "value1"}] (for select)
    }
  ],
  "submitText": "Submit Button Text",
  "onSubmit": "if (values.age < 18) return 'Must be 18+'; return 'Success!';" (optional logic)
}

TEXT:
{
  "type": "text",
  "content": "Text content here",
  "variant": "h1|h2|h3|h4|h5|h6|p|lead|caption",
  "className": "additional-css-classes" (optional)
}

IMAGE:
{
  "type": "image",
  "src": "https://example.com/image.jpg",
  "alt": "Image description",
  "width": "400px" (optional),
  "height": "300px" (optional),
  "rounded": true|false (optional),
  "shadow": true|false (optional)
}

Rules:
- Always return a valid JSON array
- Use realistic placeholder images (https://via.placeholder.com/ or https://picsum.photos/)
- Include proper validation logic when requested
- Make forms user-friendly with good labels and placeholders
- Use appropriate text variants for hierarchy

Examples:

Input: "Create a contact form with name, email, and message"
Output: [
  {"type": "text", "content": "Contact Us", "variant": "h1"},
  {"type": "form", "fields": [
    {"label": "Name", "type": "text", "required": true, "placeholder": "Enter your full name"},
    {"label": "Email", "type": "email", "required": true, "placeholder": "your@email.com"},
    {"label": "Message", "type": "textarea", "required": true, "placeholder": "Your message here...", "rows": 4}
  ], "submitText": "Send Message"}
]

Input: "Build a product showcase with image and details"
Output: [
  {"type": "text", "content": "Featured Product", "variant": "h2"},
  {"type": "image", "src": "https://picsum.photos/400/300", "alt": "Product image", "width": "400px", "rounded": true, "shadow": true},
  {"type": "text", "content": "Premium Wireless Headphones", "variant": "h3"},
  {"type": "text", "content": "Experience crystal-clear audio with our latest wireless headphones featuring noise cancellation and 30-hour battery life.", "variant": "p"}
]

Now convert the user's request into a JSON schema:"""


def build_prompt(user_prompt: str) -> str:
    return f'{SYSTEM_PROMPT}\n\nUser Request: "{user_prompt}"\n\nJSON Schema:'


def provider_from_settings() -> BaseLLMProvider:
    """Build the provider selected by LLM_PROVIDER."""
    provider = settings.LLM_PROVIDER
    if provider == "openai":
        api_key, model_name = settings.OPENAI_API_KEY, settings.OPENAI_MODEL
    else:
        api_key, model_name = settings.GEMINI_API_KEY, settings.GEMINI_MODEL

    return create_llm_provider(
        provider,
        api_key=api_key,
        model_name=model_name,
        temperature=settings.LLM_TEMPERATURE,
        timeout=settings.LLM_TIMEOUT_SECONDS,
    )


class GenerationService:
    """Asks an LLM provider for a component array and validates it.

    The provider is built from settings on first use unless one is injected,
    so a bad prompt is rejected even when credentials are missing.
    """

    def __init__(self, provider: Optional[BaseLLMProvider] = None):
        self._provider = provider

    @property
    def provider(self) -> BaseLLMProvider:
        if self._provider is None:
            self._provider = provider_from_settings()
        return self._provider

    async def generate(self, prompt: Any) -> list:
        if not isinstance(prompt, str) or not prompt.strip():
            raise InvalidInput("Prompt is required and must be a string")

        provider = self.provider
        text = await provider.generate(build_prompt(prompt))
        components = parse_components(text)
        logger.info(
            "Generated %d components with %s/%s",
            len(components), provider.name, provider.model_name,
        )
        return components

"""
Built-in AI prompt templates.

Placeholders: {name}, {business_type}, {location}, {rating_info}, {description}.
"""

from __future__ import annotations

DESCRIPTION_TEMPLATE = (
    'Write a compelling and detailed description for "{name}", which is a {business_type} '
    "located in {location} {rating_info}.\n"
    "The description should be engaging, professionally written, and highlight the unique aspects of this business.\n"
    "Include information about their services, atmosphere, and value proposition.\n"
    "Keep the tone professional but warm, and make it approximately 150-200 words.\n"
    "Do not use placeholder text or mention that this is AI-generated content."
)

FAQ_TEMPLATE = (
    'Generate 5 frequently asked questions (FAQs) with detailed answers for "{name}", which is a {business_type} '
    "located in {location}.\n"
    "Each question should address a different aspect of the business that potential customers might want to know "
    "about, such as:\n"
    "1. Services or products offered\n"
    "2. Business hours or availability\n"
    "3. Pricing or payment options\n"
    "4. Special features or unique selling points\n"
    "5. Customer experience or what to expect when visiting\n"
    "\n"
    "Format the output as a valid JSON array with each object having 'question' and 'answer' fields.\n"
    "Make the answers informative, accurate, and helpful to potential customers.\n"
    "Each answer should be 2-3 sentences long.\n"
    "Do not include any introductory or concluding text outside the JSON structure."
)

DEFAULT_PROMPTS: list[dict[str, str]] = [
    {"name": "Business Description", "type": "description", "content": DESCRIPTION_TEMPLATE},
    {"name": "Business FAQs", "type": "faq", "content": FAQ_TEMPLATE},
]

TEMPLATES_BY_TYPE: dict[str, str] = {p["type"]: p["content"] for p in DEFAULT_PROMPTS}

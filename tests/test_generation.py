import asyncio
import unittest
from unittest.mock import AsyncMock, patch

import httpx
from fastapi.testclient import TestClient

from auth import dependencies as auth_dependencies
from core import openai
from generation import prompts as generation_prompts
from generation import service as generation_service
from main import app
from prompts import defaults
from prompts import service as prompts_service

ADMIN = {"id": 1, "email": "admin@example.com", "role": "admin", "is_active": True}

LISTING = {
    "id": 7,
    "name": "Blue Door Dental",
    "main_type": "dentist",
    "formatted_address": "12 Elm St, Springfield",
    "rating": 4.8,
}


class FaqParsingTests(unittest.TestCase):
    def test_parses_json_array_inside_prose(self):
        text = 'Here you go:\n[{"question": "Q1?", "answer": "A1."}, {"question": "Q2?", "answer": "A2."}]\nThanks'
        self.assertEqual(
            generation_service.parse_faqs(text),
            [{"question": "Q1?", "answer": "A1."}, {"question": "Q2?", "answer": "A2."}],
        )

    def test_regex_fallback_for_broken_json(self):
        text = '[{"question": "Do you take walk-ins?", "answer": "Yes, most days."}, {"question": "Parking?", }'
        faqs = generation_service.parse_faqs(text)
        self.assertEqual(faqs[0], {"question": "Do you take walk-ins?", "answer": "Yes, most days."})
        self.assertEqual(faqs[1], {"question": "Parking?", "answer": generation_service.MISSING_ANSWER})

    def test_unusable_output_returns_empty(self):
        self.assertEqual(generation_service.parse_faqs("Sorry, I cannot help with that."), [])
        self.assertEqual(generation_service.parse_faqs(""), [])

    def test_fallback_faqs_mention_business(self):
        faqs = generation_prompts.fallback_faqs("Blue Door Dental", "dentist")
        self.assertEqual(len(faqs), 3)
        self.assertEqual(faqs[0]["question"], "What services does Blue Door Dental offer?")
        self.assertIn("As a dentist", faqs[0]["answer"])


class PromptRenderingTests(unittest.TestCase):
    def test_template_values_fallbacks(self):
        values = generation_prompts.template_values({"name": "Shop", "vicinity": "Old Town"})
        self.assertEqual(values["business_type"], "business")
        self.assertEqual(values["location"], "Old Town")
        self.assertEqual(values["rating_info"], "")

        values = generation_prompts.template_values({"name": "Shop"})
        self.assertEqual(values["location"], "various locations")

    def test_render_description_template(self):
        text = prompts_service.render(defaults.DESCRIPTION_TEMPLATE, generation_prompts.template_values(LISTING))
        self.assertIn('"Blue Door Dental", which is a dentist located in 12 Elm St, Springfield', text)
        self.assertIn("with a rating of 4.8 out of 5", text)
        self.assertNotIn("{", text)

    def test_render_keeps_unknown_braces(self):
        self.assertEqual(prompts_service.render('{name}: {"k": 1}', {"name": "X"}), 'X: {"k": 1}')


_RealAsyncClient = httpx.AsyncClient


def mock_client_factory(handler):
    """
    Replacement for httpx.AsyncClient that answers through `handler`.
    """

    def factory(*args, **kwargs):
        return _RealAsyncClient(transport=httpx.MockTransport(handler), base_url=kwargs.get("base_url", ""))

    return factory


class OpenAIClientTests(unittest.TestCase):
    def test_chat_text_non_json_body_is_openai_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>gateway</html>")

        with patch("core.openai.httpx.AsyncClient", new=mock_client_factory(handler)):
            with self.assertRaises(openai.OpenAIError):
                asyncio.run(openai.chat_text(api_key="sk-test", system_prompt="s", user_prompt="u"))

    def test_list_models_non_json_body_is_openai_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="not json")

        with patch("core.openai.httpx.AsyncClient", new=mock_client_factory(handler)):
            with self.assertRaises(openai.OpenAIError):
                asyncio.run(openai.list_models(api_key="sk-test"))

    def test_chat_text_returns_content(self):
        def handler(request: httpx.Request) -> httpx.Response:
            self.assertEqual(request.headers["authorization"], "Bearer sk-test")
            return httpx.Response(200, json={"choices": [{"message": {"content": "  Hello  "}}]})

        with patch("core.openai.httpx.AsyncClient", new=mock_client_factory(handler)):
            text = asyncio.run(openai.chat_text(api_key="sk-test", system_prompt="s", user_prompt="u"))
        self.assertEqual(text, "Hello")


class GenerationApiTests(unittest.TestCase):
    def setUp(self):
        app.dependency_overrides[auth_dependencies.require_admin] = lambda: ADMIN
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()

    def test_generate_faq_stores_parsed_items(self):
        saved = dict(LISTING, faqs=[{"question": "Q?", "answer": "A."}], faqs_generated=True)
        with patch("listings.repository.get_listing", new=AsyncMock(return_value=dict(LISTING))), patch(
            "api_keys.service.get_active_key", new=AsyncMock(return_value="sk-test")
        ), patch("prompts.repository.get_latest_by_type", new=AsyncMock(return_value=None)), patch(
            "core.openai.chat_text", new=AsyncMock(return_value='[{"question": "Q?", "answer": "A."}]')
        ) as chat_text, patch(
            "listings.repository.save_faqs", new=AsyncMock(return_value=saved)
        ) as save_faqs:
            response = self.client.post("/api/listings/7/generate-faq")

        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertEqual(payload["message"], "FAQs generated successfully")
        self.assertEqual(payload["faqs"], [{"question": "Q?", "answer": "A."}])
        self.assertTrue(payload["listing"]["faqs_generated"])
        save_faqs.assert_awaited_once_with(7, [{"question": "Q?", "answer": "A."}])
        self.assertIn("Blue Door Dental", chat_text.await_args.kwargs["user_prompt"])

    def test_generate_faq_uses_fallback_when_unparseable(self):
        with patch("listings.repository.get_listing", new=AsyncMock(return_value=dict(LISTING))), patch(
            "api_keys.service.get_active_key", new=AsyncMock(return_value="sk-test")
        ), patch("prompts.repository.get_latest_by_type", new=AsyncMock(return_value=None)), patch(
            "core.openai.chat_text", new=AsyncMock(return_value="no json here")
        ), patch(
            "listings.repository.save_faqs", new=AsyncMock(return_value=dict(LISTING))
        ):
            response = self.client.post("/api/listings/7/generate-faq")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json()["faqs"]), 3)

    def test_generate_description_uses_stored_prompt(self):
        stored = {"id": 3, "type": "description", "content": "Describe {name} in {location}."}
        with patch("listings.repository.get_listing", new=AsyncMock(return_value=dict(LISTING))), patch(
            "api_keys.service.get_active_key", new=AsyncMock(return_value="sk-test")
        ), patch("prompts.repository.get_latest_by_type", new=AsyncMock(return_value=stored)), patch(
            "core.openai.chat_text", new=AsyncMock(return_value="A friendly dental office.")
        ) as chat_text, patch(
            "listings.repository.save_description", new=AsyncMock(return_value=dict(LISTING))
        ) as save_description:
            response = self.client.post("/api/listings/7/generate-description")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["description"], "A friendly dental office.")
        self.assertTrue(response.json()["success"])
        self.assertEqual(
            chat_text.await_args.kwargs["user_prompt"],
            "Describe Blue Door Dental in 12 Elm St, Springfield.",
        )
        save_description.assert_awaited_once_with(7, "A friendly dental office.")

    def test_missing_listing_is_404(self):
        with patch("listings.repository.get_listing", new=AsyncMock(return_value=None)):
            response = self.client.post("/api/listings/99/generate-description")
        self.assertEqual(response.status_code, 404)

    def test_missing_api_key_is_500(self):
        with patch("listings.repository.get_listing", new=AsyncMock(return_value=dict(LISTING))), patch(
            "api_keys.service.get_active_key", new=AsyncMock(return_value=None)
        ):
            response = self.client.post("/api/listings/7/generate-faq")
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["detail"], "OpenAI API key is not configured")

    def test_upstream_failure_is_502(self):
        with patch("listings.repository.get_listing", new=AsyncMock(return_value=dict(LISTING))), patch(
            "api_keys.service.get_active_key", new=AsyncMock(return_value="sk-test")
        ), patch("prompts.repository.get_latest_by_type", new=AsyncMock(return_value=None)), patch(
            "core.openai.chat_text", new=AsyncMock(side_effect=openai.OpenAIError("boom"))
        ):
            response = self.client.post("/api/listings/7/generate-description")
        self.assertEqual(response.status_code, 502)

    def test_non_json_upstream_body_is_502(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="upstream proxy page")

        with patch("listings.repository.get_listing", new=AsyncMock(return_value=dict(LISTING))), patch(
            "api_keys.service.get_active_key", new=AsyncMock(return_value="sk-test")
        ), patch("prompts.repository.get_latest_by_type", new=AsyncMock(return_value=None)), patch(
            "core.openai.httpx.AsyncClient", new=mock_client_factory(handler)
        ):
            response = self.client.post("/api/listings/7/generate-description")
        self.assertEqual(response.status_code, 502)

    def test_verify_openai(self):
        with patch("api_keys.service.get_active_key", new=AsyncMock(return_value="sk-test")), patch(
            "core.openai.list_models", new=AsyncMock(return_value=["gpt-4o-mini"])
        ):
            response = self.client.get("/api/verify-openai")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "connected")

    def test_generation_requires_admin(self):
        app.dependency_overrides.clear()
        response = self.client.post("/api/listings/7/generate-faq")
        self.assertEqual(response.status_code, 401)


if __name__ == "__main__":
    unittest.main()

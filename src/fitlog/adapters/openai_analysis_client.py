"""OpenAI Responses API client for food analysis."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI

from fitlog.domain.errors import AnalysisError
from fitlog.services.analysis import AnalysisClient


@dataclass
class OpenAIAnalysisClient(AnalysisClient):
    """Analysis client backed by OpenAI Responses API."""

    client: AsyncOpenAI
    store: bool = False

    @classmethod
    def create(cls, api_key: str, store: bool = False) -> "OpenAIAnalysisClient":
        """Create an OpenAI analysis client."""
        return cls(client=AsyncOpenAI(api_key=api_key), store=store)

    async def analyze(
        self,
        *,
        model: str,
        prompt: str,
        schema: dict[str, object],
        image_data_url: str | None = None,
    ) -> dict[str, object]:
        """Call OpenAI Responses API with structured outputs."""
        content: list[dict[str, object]] = [{"type": "input_text", "text": prompt}]
        if image_data_url:
            content.append({"type": "input_image", "image_url": image_data_url})
        response = await self.client.responses.create(
            model=model,
            input=[{"role": "user", "content": content}],
            text={
                "format": {
                    "type": "json_schema",
                    "name": "food_analysis",
                    "strict": True,
                    "schema": schema,
                }
            },
            store=self.store,
        )
        output_text = response.output_text
        if not output_text:
            raise AnalysisError("OpenAI returned an empty response")
        try:
            return json.loads(output_text)
        except json.JSONDecodeError as exc:
            raise AnalysisError("OpenAI returned invalid JSON") from exc

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()

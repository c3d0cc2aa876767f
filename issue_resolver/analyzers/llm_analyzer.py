"""
LLM Analyzer for AI Issue Resolver.

OpenAI chat-completion integration for issue analysis, code generation and
code review. Generation and review responses go through extraction and
schema validation; a malformed response degrades to an empty result.
"""

import json
import logging
import time
from typing import Any, Optional

from openai import AsyncOpenAI, OpenAIError

from issue_resolver.config import get_settings
from issue_resolver.exceptions import (
    ExtractionError,
    ProviderError,
    SchemaValidationError,
)
from issue_resolver.models.schemas import CodeChange, ReviewFeedback
from issue_resolver.parsing.validation import (
    CODE_CHANGES,
    format_instructions,
    parse_structured,
)
from issue_resolver.services.telemetry import Telemetry

SUPPORTED_PROVIDERS = ("openai",)

ISSUE_ANALYSIS_PROMPT = """You are a skilled software engineer analyzing GitHub issues.
Focus on identifying technical requirements, implementation details, and potential
edge cases. Consider best practices and maintainability in your analysis."""

CODE_GENERATION_PROMPT = """You are a code generation AI assistant.
Generate precise, production-ready code changes that follow best practices.
Consider error handling, type safety, and performance in your implementations.
Include clear comments and documentation for generated code."""

CODE_REVIEW_PROMPT = """You are a code review AI assistant.
Provide comprehensive feedback on:
1. Code quality and patterns
2. Performance considerations
3. Maintainability issues
4. Testing coverage
5. Documentation completeness"""

SECURITY_REVIEW_PROMPT = """You are a security-focused code reviewer.
Analyze code for:
1. Security vulnerabilities
2. Data exposure risks
3. Input validation issues
4. Authentication/authorization concerns
5. Dependency security
Provide specific remediation steps for each finding."""

STRICT_JSON_NOTE = "Strictly return valid JSON as per this schema. Do not include anything else."


class LLMAnalyzer:
    """
    Model integration for the resolver workflows.

    Provider errors (auth, rate limit, timeout) are raised as ProviderError
    and are never retried.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        provider: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        base_url: Optional[str] = None,
        telemetry: Optional[Telemetry] = None,
    ) -> None:
        """
        Initialize the LLM Analyzer.

        Args:
            api_key: Provider API key. Uses settings if not provided.
            model: Model to use. Uses settings if not provided.
            provider: Provider name. Uses settings if not provided.
            temperature: Sampling temperature. Uses settings if not provided.
            max_tokens: Response token limit. Uses settings if not provided.
            base_url: Provider API base URL override.
            telemetry: Event sink for model operations.

        Raises:
            ProviderError: If the provider is not supported.
        """
        self._logger = logging.getLogger("issue_resolver.llm_analyzer")
        settings = get_settings()

        self._provider = (provider or settings.model_provider).lower()
        if self._provider not in SUPPORTED_PROVIDERS:
            raise ProviderError(f"Unsupported model provider: {self._provider}")

        self._api_key = api_key or settings.model_api_key
        self._model = model or settings.model_name
        self._temperature = temperature if temperature is not None else settings.model_temperature
        self._max_tokens = max_tokens or settings.model_max_tokens
        self._telemetry = telemetry or Telemetry(enabled=False)

        self._client: Optional[AsyncOpenAI] = None
        if self._api_key and self._api_key != "your_model_api_key_here":
            self._client = AsyncOpenAI(
                api_key=self._api_key,
                base_url=base_url or settings.model_api_base,
            )

    @property
    def is_configured(self) -> bool:
        """Check if the model client is available."""
        return self._client is not None

    @property
    def model(self) -> str:
        """Model name used for completions."""
        return self._model

    async def _call_model(self, operation: str, system_prompt: str, user_prompt: str) -> str:
        """
        Run one chat completion.

        Args:
            operation: Operation name for telemetry.
            system_prompt: System prompt for the model.
            user_prompt: User prompt with the request.

        Returns:
            Response text ("" if the model returned no content).

        Raises:
            ProviderError: If the client is not configured or the call fails.
        """
        if not self._client:
            raise ProviderError("Model API key not configured")

        start = time.perf_counter()
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except OpenAIError as e:
            self._logger.error(f"{operation} failed: {e}")
            self._telemetry.log_ai_operation(
                operation, self._model, (time.perf_counter() - start) * 1000, success=False
            )
            raise ProviderError(f"Model call failed during {operation}: {e}") from e

        self._telemetry.log_ai_operation(
            operation, self._model, (time.perf_counter() - start) * 1000, success=True
        )
        return response.choices[0].message.content or ""

    async def analyze_issue(self, issue_body: str) -> str:
        """
        Produce a technical analysis of an issue.

        Args:
            issue_body: Full issue text.

        Returns:
            Free-form analysis text.
        """
        user_prompt = f"Analyze this issue and provide a technical summary:\n\n{issue_body}"
        return await self._call_model("analyze_issue", ISSUE_ANALYSIS_PROMPT, user_prompt)

    async def generate_code_changes(self, analysis: str) -> list[CodeChange]:
        """
        Generate code changes from an issue analysis.

        Args:
            analysis: Technical analysis of the requirements.

        Returns:
            Validated changes; empty if the response could not be parsed.
        """
        user_prompt = (
            f"{format_instructions(CODE_CHANGES)}\n{STRICT_JSON_NOTE} "
            f"Generate code changes based on this analysis:\n\n{analysis}"
        )
        response = await self._call_model("generate_code_changes", CODE_GENERATION_PROMPT, user_prompt)
        return self._parse_code_changes(response, "code changes")

    async def generate_changes_from_feedback(
        self,
        feedback: str,
        files: list[dict[str, Any]],
        pr_context: Optional[dict[str, Any]] = None,
    ) -> list[CodeChange]:
        """
        Generate code changes that address review feedback on a PR.

        Args:
            feedback: Free-text change request.
            files: Files currently changed in the PR.
            pr_context: PR metadata (title, body, branches).

        Returns:
            Validated changes; empty if the response could not be parsed.
        """
        context = json.dumps({"pullRequest": pr_context or {}, "files": files})
        user_prompt = (
            f"{format_instructions(CODE_CHANGES)}\n{STRICT_JSON_NOTE} "
            f"Generate code changes based on this feedback:\n\n{feedback}\n\nContext:\n{context}"
        )
        response = await self._call_model(
            "generate_changes_from_feedback", CODE_GENERATION_PROMPT, user_prompt
        )
        return self._parse_code_changes(response, "feedback changes")

    async def review_code(self, files: list[dict[str, Any]]) -> ReviewFeedback:
        """
        Review the files of a PR.

        Args:
            files: Files to review.

        Returns:
            Review feedback; all lists empty if the response could not be parsed.
        """
        user_prompt = (
            f"{format_instructions(ReviewFeedback)}\n{STRICT_JSON_NOTE} "
            f"Review these files and provide comprehensive feedback:\n{json.dumps(files, indent=2)}"
        )
        response = await self._call_model("review_code", CODE_REVIEW_PROMPT, user_prompt)

        try:
            return parse_structured(response, ReviewFeedback)
        except (ExtractionError, SchemaValidationError) as e:
            self._logger.warning(f"Failed to parse code review: {e}")
            self._telemetry.log_error(e, {"operation": "review_code"})
            return ReviewFeedback.empty()

    async def analyze_security(self, files: list[dict[str, Any]]) -> str:
        """
        Produce a security narrative for the files of a PR.

        Args:
            files: Files to analyze.

        Returns:
            Free-form security analysis, rendered as-is in the review comment.
        """
        user_prompt = f"Analyze these files for security concerns:\n{json.dumps(files)}"
        return await self._call_model("analyze_security", SECURITY_REVIEW_PROMPT, user_prompt)

    def _parse_code_changes(self, response: str, what: str) -> list[CodeChange]:
        """Parse a change list, degrading to empty on malformed output."""
        try:
            return parse_structured(response, CODE_CHANGES)
        except (ExtractionError, SchemaValidationError) as e:
            self._logger.warning(f"Failed to parse {what}: {e}")
            self._telemetry.log_error(e, {"operation": what})
            return []

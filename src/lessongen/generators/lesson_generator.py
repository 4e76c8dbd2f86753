"""Lesson generator with bounded retry and content validation.

One ``generate`` call runs up to ``max_attempts`` model calls:

1. Call the model with the prompt bundle and the response schema
2. Parse the raw text (fence stripping, JSON decoding)
3. Validate the payload with the content heuristics
4. Map the accepted payload onto the domain lesson

Transport and parse errors back off linearly (base_delay * attempt).
Validator rejections retry immediately, since the failure is about content
quality rather than a transient fault. Nothing raised inside the loop
reaches the caller; the result is a lesson or None.

When attempts run out, the final attempt decides: a rejected payload is
returned under the degrade policy, a transport or parse failure yields None.
"""

import logging
import threading
import time
from typing import Optional, Union

from lessongen.config import (
    ExhaustionPolicy,
    GenerationConfig,
    GenerationSettings,
    ValidationThresholds,
)
from lessongen.errors import ParseError, ValidationRejection
from lessongen.generators.lesson_mapper import map_lesson
from lessongen.models.lesson import (
    GenerationRequest,
    LanguageLevel,
    LessonContent,
    SessionType,
)
from lessongen.parsers.response_parser import parse_lesson_payload
from lessongen.prompts.lesson_prompts import (
    DEFAULT_PROFILE,
    PromptBundle,
    TutorProfile,
    build_lesson_prompt,
)
from lessongen.utils.llm_client import LLMClient
from lessongen.utils.logging_config import generation_stage_logger
from lessongen.validators.content_validator import inspect_payload
from lessongen.validators.schema import (
    LESSON_RESPONSE_SCHEMA,
    LESSON_SCHEMA_NAME,
    RawLessonPayload,
)

logger = logging.getLogger(__name__)


class LessonGenerator:
    """Generate validated lessons from an injected LLM client.

    The generator holds no per-request state, so one instance can serve
    concurrent requests from several threads.
    """

    def __init__(
        self,
        llm_client: Optional[LLMClient] = None,
        settings: Optional[GenerationSettings] = None,
        thresholds: Optional[ValidationThresholds] = None,
        generation_config: Optional[GenerationConfig] = None,
        profile: TutorProfile = DEFAULT_PROFILE,
    ):
        """Initialize lesson generator.

        Args:
            llm_client: LLM client (creates default from environment if None)
            settings: Retry settings (default: GenerationSettings.from_env())
            thresholds: Content validator limits (default: ValidationThresholds.from_env())
            generation_config: Sampling parameters (default: GenerationConfig.from_env())
            profile: Tutor persona used in prompts
        """
        self.settings = settings or GenerationSettings.from_env()
        self.thresholds = thresholds or ValidationThresholds.from_env()
        self.generation_config = generation_config or GenerationConfig.from_env()
        self.profile = profile
        self.llm_client = llm_client or LLMClient(model=self.settings.model)

        logger.info(
            f"LessonGenerator initialized: max_attempts={self.settings.max_attempts}, "
            f"policy={self.settings.exhaustion_policy.value}"
        )

    def generate_lesson(
        self,
        level: Union[LanguageLevel, str],
        session_type: Union[SessionType, str],
        topic: Optional[str] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> Optional[LessonContent]:
        """Build the prompt for a request and generate the lesson.

        Args:
            level: CEFR level (A0, A1, A2, B1)
            session_type: daily, exam or topic
            topic: Lesson topic (required for topic sessions)
            cancel_event: Set it to stop retrying and discard the result

        Returns:
            The lesson, or None if no attempt produced a usable payload

        Raises:
            ValueError: If the request parameters are invalid
        """
        request = GenerationRequest(level=level, session_type=session_type, topic=topic)
        bundle = build_lesson_prompt(request, self.profile, self.generation_config)
        return self.generate(bundle, cancel_event=cancel_event)

    def generate(
        self,
        bundle: PromptBundle,
        cancel_event: Optional[threading.Event] = None,
    ) -> Optional[LessonContent]:
        """Run the retry loop for a prompt bundle."""
        max_attempts = self.settings.max_attempts
        last_rejected: Optional[RawLessonPayload] = None

        with generation_stage_logger(
            "lesson_generation",
            level=bundle.level.value,
            session_type=bundle.session_type.value,
        ):
            for attempt in range(1, max_attempts + 1):
                if self._is_cancelled(cancel_event):
                    logger.info(f"Generation cancelled before attempt {attempt}")
                    return None

                try:
                    payload = self._attempt(bundle)

                except ValidationRejection as e:
                    last_rejected = e.payload
                    logger.warning(
                        f"Attempt {attempt}/{max_attempts}: response validation failed ({e}), retrying...",
                        extra={"attempt": attempt, "rule": e.rule},
                    )
                    continue

                except ParseError as e:
                    last_rejected = None
                    logger.warning(
                        f"Attempt {attempt}/{max_attempts}: unparseable response: {str(e)[:200]}",
                        extra={"attempt": attempt},
                    )
                    if self._backoff(attempt, cancel_event):
                        return None
                    continue

                except Exception as e:
                    last_rejected = None
                    logger.error(
                        f"Generation error (attempt {attempt}/{max_attempts}): {str(e)[:200]}",
                        extra={"attempt": attempt},
                        exc_info=True,
                    )
                    if self._backoff(attempt, cancel_event):
                        return None
                    continue

                if self._is_cancelled(cancel_event):
                    logger.info(f"Generation cancelled, discarding result of attempt {attempt}")
                    return None

                logger.info(f"Lesson accepted on attempt {attempt}/{max_attempts}")
                return map_lesson(payload, bundle.session_type)

            return self._on_exhaustion(last_rejected, bundle)

    def _attempt(self, bundle: PromptBundle) -> RawLessonPayload:
        """Make one model call and return a payload that passed validation.

        Raises:
            TransportError: Provider call failed
            ParseError: Response is not a usable JSON object
            ValidationRejection: Payload failed the content rules
        """
        config = bundle.generation_config
        text = self.llm_client.generate_text(
            prompt=bundle.task_prompt,
            system_prompt=bundle.system_instruction,
            response_schema=LESSON_RESPONSE_SCHEMA,
            schema_name=LESSON_SCHEMA_NAME,
            temperature=config.temperature,
            top_p=config.top_p,
            max_tokens=config.max_output_tokens,
        )

        payload = parse_lesson_payload(text)

        outcome = inspect_payload(payload, bundle.level.value, self.thresholds)
        if not outcome.passed:
            raise ValidationRejection(outcome.rule, outcome.detail, payload=payload)

        return payload

    def _on_exhaustion(
        self,
        last_rejected: Optional[RawLessonPayload],
        bundle: PromptBundle,
    ) -> Optional[LessonContent]:
        max_attempts = self.settings.max_attempts

        if last_rejected is None:
            logger.error(f"Final attempt {max_attempts}/{max_attempts} failed, no lesson generated")
            return None

        if self.settings.exhaustion_policy == ExhaustionPolicy.STRICT:
            logger.error(
                f"Final attempt {max_attempts}/{max_attempts} failed validation, rejecting (strict policy)"
            )
            return None

        logger.warning(
            f"Final attempt {max_attempts}/{max_attempts} failed validation, returning partial data"
        )
        return map_lesson(last_rejected, bundle.session_type)

    def _backoff(self, attempt: int, cancel_event: Optional[threading.Event]) -> bool:
        """Wait before the next attempt. Returns True if cancelled meanwhile."""
        if attempt >= self.settings.max_attempts:
            return False

        delay = self.settings.base_delay * attempt
        logger.info(f"Retrying in {delay:.2f} seconds...")
        if cancel_event is not None:
            return cancel_event.wait(delay)
        time.sleep(delay)
        return False

    @staticmethod
    def _is_cancelled(cancel_event: Optional[threading.Event]) -> bool:
        return cancel_event is not None and cancel_event.is_set()


def generate_lesson(
    level: Union[LanguageLevel, str],
    session_type: Union[SessionType, str],
    topic: Optional[str] = None,
    llm_client: Optional[LLMClient] = None,
    cancel_event: Optional[threading.Event] = None,
) -> Optional[LessonContent]:
    """Generate one lesson with default settings.

    Returns None when the final attempt failed at transport or parse, or
    when it was rejected under the strict exhaustion policy.
    """
    generator = LessonGenerator(llm_client=llm_client)
    return generator.generate_lesson(level, session_type, topic, cancel_event=cancel_event)

# cronos/assistant.py

"""
Natural-language helpers in front of the appointment form.

A provider turns free text into a draft appointment. Drafts are validated
by the appointment store exactly like hand-entered ones. With no provider
configured the feature is simply unavailable.
"""

import json
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Iterable, Optional

import google.generativeai as genai
from pydantic import ValidationError as PydanticValidationError

from .logging_config import get_logger
from .schemas import AppointmentDraft, Client, ExtractedAppointment

logger = get_logger(__name__)

SYSTEM_INSTRUCTION = (
    "You are a scheduling assistant. "
    "Extract appointment details from the user's natural language request. "
    "If the duration is not specified, assume 1 hour. "
    "Return dates in ISO 8601 format. "
    "If the user does not specify a date, assume today or the next logical "
    "occurrence based on \"tomorrow\", \"next friday\", etc. "
    "Answer with a JSON object with the keys title, clientName, start, end and notes."
)


def fallback_reminder(client_name: str, time: str, service: str) -> str:
    return f"Olá {client_name}, lembrete do seu agendamento: {service} às {time}."


class SuggestionProvider(ABC):
    available = True

    @abstractmethod
    def suggest(self, text: str, reference_time: datetime) -> Optional[ExtractedAppointment]:
        ...

    def reminder(self, client_name: str, time: str, service: str) -> str:
        return fallback_reminder(client_name, time, service)


class NullSuggestionProvider(SuggestionProvider):
    available = False

    def suggest(self, text: str, reference_time: datetime) -> Optional[ExtractedAppointment]:
        return None


def parse_extraction(raw: str) -> Optional[ExtractedAppointment]:
    """Parse the model's JSON answer. Returns None when it is unusable."""
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("assistant_invalid_json")
        return None
    if not isinstance(data, dict):
        return None

    if "clientName" in data and "client_name" not in data:
        data["client_name"] = data.pop("clientName")
    if not data.get("end") and data.get("start"):
        try:
            data["end"] = (datetime.fromisoformat(data["start"]) + timedelta(hours=1)).isoformat()
        except ValueError:
            return None

    try:
        return ExtractedAppointment.model_validate(data)
    except PydanticValidationError as e:
        logger.warning("assistant_extraction_rejected", errors=e.error_count())
        return None


class GeminiSuggestionProvider(SuggestionProvider):
    def __init__(self, api_key: str, model_name: str = "gemini-2.5-flash", model=None):
        self.model_name = model_name
        if model is None:
            genai.configure(api_key=api_key)
            model = genai.GenerativeModel(model_name, system_instruction=SYSTEM_INSTRUCTION)
        self._model = model

    def suggest(self, text: str, reference_time: datetime) -> Optional[ExtractedAppointment]:
        prompt = (
            f"The current date and time is: {reference_time.strftime('%Y-%m-%d %H:%M')}.\n"
            f"Request: {text}"
        )
        try:
            response = self._model.generate_content(
                prompt,
                generation_config={"response_mime_type": "application/json"},
            )
            raw = response.text
        except Exception as e:
            logger.error("assistant_request_failed", model=self.model_name, error=str(e))
            return None

        if not raw:
            return None
        return parse_extraction(raw)

    def reminder(self, client_name: str, time: str, service: str) -> str:
        prompt = (
            f"Create a polite, short WhatsApp reminder message for a client named {client_name} "
            f"about their appointment for {service} at {time}. Portuguese language."
        )
        try:
            response = self._model.generate_content(prompt)
            text = response.text
        except Exception as e:
            logger.error("assistant_reminder_failed", model=self.model_name, error=str(e))
            return fallback_reminder(client_name, time, service)
        return text or fallback_reminder(client_name, time, service)


def get_suggestion_provider(settings) -> SuggestionProvider:
    if not settings.GEMINI_API_KEY:
        logger.info("assistant_unavailable", reason="no GEMINI_API_KEY")
        return NullSuggestionProvider()
    return GeminiSuggestionProvider(settings.GEMINI_API_KEY, settings.GEMINI_MODEL)


def match_client(name: Optional[str], clients: Iterable[Client]) -> Optional[Client]:
    if not name:
        return None
    wanted = name.strip().casefold()
    for client in clients:
        if client.name.strip().casefold() == wanted:
            return client
    return None


def draft_from(
    extracted: ExtractedAppointment,
    provider_id: Optional[str] = None,
    clients: Iterable[Client] = (),
) -> AppointmentDraft:
    """
    Turn an extraction into a pre-filled booking form.

    The client is picked only on an exact (case-insensitive) name match;
    otherwise the extracted name is passed along for the form to resolve.
    """
    client = match_client(extracted.client_name, clients)
    return AppointmentDraft(
        client_id=client.id if client else None,
        client_name=extracted.client_name,
        title=extracted.title,
        start=extracted.start,
        end=extracted.end,
        notes=extracted.notes,
        provider_id=provider_id,
    )

"""Shared fixtures for the mediastamp test suite."""

from __future__ import annotations

import threading
from typing import Optional

import pytest

from mediastamp.config.models import MediastampConfig, TimestampSettings
from mediastamp.orchestration import UseCaseOrchestrator
from mediastamp.timestamps import CandidateValidator, TimestampParser, TimestampReconciler
from tests.doubles import TODAY, FakeAttributeWriter, FakeGateway, RecordingPreview, ScriptedPrompt


@pytest.fixture
def settings() -> TimestampSettings:
    return TimestampSettings()


@pytest.fixture
def parser(settings: TimestampSettings) -> TimestampParser:
    return TimestampParser(settings)


@pytest.fixture
def validator(settings: TimestampSettings) -> CandidateValidator:
    return CandidateValidator(settings, today=lambda: TODAY)


@pytest.fixture
def make_reconciler(settings: TimestampSettings, parser: TimestampParser, validator):
    def factory(prompt: Optional[ScriptedPrompt] = None) -> TimestampReconciler:
        return TimestampReconciler(settings, parser, validator, prompt, lock=threading.Lock())

    return factory


@pytest.fixture
def config() -> MediastampConfig:
    return MediastampConfig.model_validate({"tools": {"max_workers": 4}})


@pytest.fixture
def make_orchestrator(config: MediastampConfig):
    def factory(
        gateway: FakeGateway,
        *,
        prompt: Optional[ScriptedPrompt] = None,
        preview: Optional[RecordingPreview] = None,
        writer: Optional[FakeAttributeWriter] = None,
    ) -> UseCaseOrchestrator:
        return UseCaseOrchestrator.from_config(
            config,
            gateway=gateway,
            attribute_writer=writer or FakeAttributeWriter(),
            prompt=prompt or ScriptedPrompt(),
            preview=preview or RecordingPreview(),
            today=lambda: TODAY,
        )

    return factory

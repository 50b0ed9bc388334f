import json

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.main import create_app
from app.services.pipeline.interview_pipeline import InterviewPipeline
from fakes import FIXED_COVER, FIXED_TIMESTAMP, FakeLLM, FakeRepository


@pytest.fixture
def valid_body():
    return {
        "type": "technical",
        "role": "Backend Engineer",
        "level": "Senior",
        "techstack": "Go,Postgres",
        "amount": 5,
        "userid": "u1",
    }

@pytest.fixture
def fake_llm():
    return FakeLLM(reply=json.dumps(["Q1", "Q2", "Q3", "Q4", "Q5"]))

@pytest.fixture
def fake_repository():
    return FakeRepository()

@pytest.fixture
def make_pipeline():
    def factory(llm, repository):
        return InterviewPipeline(
            llm=llm,
            repository=repository,
            cover_picker=lambda: FIXED_COVER,
            clock=lambda: FIXED_TIMESTAMP,
        )
    return factory

@pytest.fixture
def make_client(make_pipeline):
    """Build a TestClient around a pipeline wired to the given fakes."""
    clients = []

    def factory(llm, repository, expose_diagnostics: bool = True):
        settings = Settings(LOG_TO_FILE=False, EXPOSE_DIAGNOSTICS=expose_diagnostics)
        app = create_app(settings=settings, interview_pipeline=make_pipeline(llm, repository))
        test_client = TestClient(app)
        test_client.__enter__()
        clients.append(test_client)
        return test_client

    yield factory
    for test_client in clients:
        test_client.__exit__(None, None, None)

@pytest.fixture
def client(make_client, fake_llm, fake_repository):
    return make_client(fake_llm, fake_repository)

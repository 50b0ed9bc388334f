from fastapi import Request

from app.services.pipeline.interview_pipeline import InterviewPipeline


def get_interview_pipeline(request: Request) -> InterviewPipeline:
    """
    Dependency returning the pipeline built during application startup.
    Stored on app.state so tests can inject one wired to fakes.
    """
    return request.app.state.interview_pipeline

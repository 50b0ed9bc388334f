"""Small helpers shared by the interview pipeline."""
from .utils import INTERVIEW_COVERS, get_random_interview_cover, split_techstack

__all__ = [
    "INTERVIEW_COVERS",
    "get_random_interview_cover",
    "split_techstack",
]

from .generation import COVER_IMAGES, create_interview, generate_interview, generate_questions, random_cover
from .models import GeneratedQuestions, GenerationOutcome, InterviewRequest

__all__ = [
    "COVER_IMAGES",
    "GeneratedQuestions",
    "GenerationOutcome",
    "InterviewRequest",
    "create_interview",
    "generate_interview",
    "generate_questions",
    "random_cover",
]

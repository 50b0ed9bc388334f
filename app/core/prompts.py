from typing import Union


def _format_amount(amount: Union[int, float]) -> str:
    """Render the requested count the way a person would write it (5.0 -> "5")."""
    if isinstance(amount, float) and amount.is_integer():
        return str(int(amount))
    return str(amount)


def generate_interview_questions_prompt(
    role: str,
    level: str,
    techstack: str,
    interview_type: str,
    amount: Union[int, float],
) -> str:
    """
    Generate the prompt for mock interview question generation.

    Args:
        role: The job role.
        level: The seniority level of the job.
        techstack: Comma-separated technologies used in the job.
        interview_type: Whether questions should lean behavioural or technical.
        amount: Number of questions requested.

    Returns:
        The formatted prompt string.
    """
    return (
        "Prepare interview questions in STRICT JSON format.\n"
        f"The job role is {role}.\n"
        f"The job experience level is {level}.\n"
        f"The tech stack used in the job is: {techstack}.\n"
        f"The focus between behavioural and technical questions should lean towards: {interview_type}.\n"
        f"The amount of questions required is: {_format_amount(amount)}.\n\n"
        "IMPORTANT:\n"
        "- Return ONLY a valid JSON array of strings.\n"
        "- Example output: [\"Question 1\", \"Question 2\", \"Question 3\"]\n"
        "- Do not include anything else (no markdown, no explanations).\n"
        "- Do not use code blocks.\n"
    )

"""Prompt builders for question generation, answer evaluation and summaries."""
from __future__ import annotations

import json
import time
import uuid
from typing import Dict, List, Optional

from interview.types import QUESTION_COUNT, Transcript

RESUME_CONTEXT_CHARS = 1200

GENERIC_FOCUS = "core computer science fundamentals, problem solving, and software engineering practice"

ROLE_FOCUS: Dict[str, str] = {
    "Full-Stack Developer": "React, Node.js, JavaScript, REST APIs, databases, and full-stack architecture",
    "Frontend Developer": "HTML, CSS, JavaScript, React/Vue/Angular, browser performance, and accessibility",
    "Backend Developer": "server-side languages (Node.js/Python/Java), API design, databases, caching, and scalability",
    "Machine Learning Engineer": "model training, feature engineering, evaluation metrics, MLOps, and deployment",
    "Data Scientist": "statistics, hypothesis testing, machine learning, data wrangling, and experiment design",
    "DevOps Engineer": "CI/CD, containers, Kubernetes, infrastructure as code, monitoring, and incident response",
    "Mobile Developer": "iOS/Android development, app lifecycle, offline storage, and mobile performance",
    "Product Manager": "product strategy, prioritization, metrics, user research, and stakeholder management",
    "UI/UX Designer": "user research, interaction design, design systems, usability testing, and accessibility",
    "Data Analyst": "SQL, data visualization, spreadsheets, descriptive statistics, and business reporting",
    "Cloud Engineer": "AWS/Azure/GCP services, networking, identity and access, cost control, and reliability",
    "Cybersecurity Engineer": "threat modeling, network security, cryptography, vulnerability management, and incident handling",
    "QA Engineer": "test strategy, automation frameworks, regression testing, and defect triage",
    "Business Analyst": "requirements elicitation, process modeling, data analysis, and stakeholder communication",
    "Software Engineer": GENERIC_FOCUS,
}


def known_roles() -> List[str]:
    """Roles offered by the job-role picker, in display order."""

    return list(ROLE_FOCUS)


def role_focus(role: str) -> str:
    return ROLE_FOCUS.get(role, GENERIC_FOCUS)


def truncate_resume(resume_context: Optional[str], limit: int = RESUME_CONTEXT_CHARS) -> str:
    """Trim résumé text to ``limit`` characters so prompts stay bounded."""

    if not resume_context:
        return ""
    return resume_context.strip()[:limit]


def uniqueness_token() -> str:
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}"


def build_question_prompt(
    role: str,
    difficulty: str,
    question_number: int,
    resume_context: Optional[str] = None,
    company_name: Optional[str] = None,
    nonce: Optional[str] = None,
) -> str:
    """Prompt for one interview question tailored to role, tier and résumé."""

    target = f"{role} position"
    if company_name:
        target += f" at {company_name}"
    lines = [
        f"You are an expert technical interviewer for a {target}.",
        f"Generate a {difficulty} difficulty technical interview question (question {question_number}/{QUESTION_COUNT}).",
        f"The question should test knowledge of {role_focus(role)}.",
    ]
    excerpt = truncate_resume(resume_context)
    if excerpt:
        lines.append("Tailor the question to the candidate's background where it fits. Resume excerpt:")
        lines.append('"""')
        lines.append(excerpt)
        lines.append('"""')
    lines.append(f"Request id: {nonce or uniqueness_token()}. Do not repeat questions from earlier requests.")
    lines.append("Provide only the question text, no additional commentary.")
    return "\n".join(lines)


def build_evaluation_prompt(question: str, answer: str) -> str:
    return (
        "Evaluate this interview answer on a scale of 0-10.\n"
        f"Question: {question}\n"
        f"Answer: {answer}\n"
        "\n"
        'Provide a score in the format "Score: X/10" followed by brief feedback.'
    )


def build_summary_prompt(transcript: Transcript) -> str:
    qa = json.dumps([pair.model_dump() for pair in transcript.qa], ensure_ascii=False)
    scores = ", ".join(str(score) for score in transcript.scores)
    return (
        "Summarize this interview performance:\n"
        f"Questions and Answers: {qa}\n"
        f"Individual Scores: {scores}\n"
        "\n"
        "Provide:\n"
        '1. A final score out of 100 (format: "Final Score: XX")\n'
        "2. A concise 2-3 sentence summary of the candidate's performance, strengths, and areas for improvement."
    )


__all__ = [
    "RESUME_CONTEXT_CHARS",
    "ROLE_FOCUS",
    "known_roles",
    "role_focus",
    "truncate_resume",
    "uniqueness_token",
    "build_question_prompt",
    "build_evaluation_prompt",
    "build_summary_prompt",
]

"""Deterministic substitutes used when the model cannot be reached."""
from __future__ import annotations

import math
from typing import Dict, List, Optional, Sequence

from interview.types import Question, SummaryResult, time_limit_for

QuestionBank = Dict[str, List[str]]

GENERIC_BANK: QuestionBank = {
    "easy": [
        "What is the difference between a process and a thread?",
        "Explain what version control is and why teams use it.",
        "What is the difference between an array and a linked list?",
    ],
    "medium": [
        "How would you design a cache for a slow external service, and how would you keep it fresh?",
        "Explain how you would debug an intermittent failure that only appears in production.",
        "Describe the trade-offs between SQL and NoSQL databases for a new product.",
    ],
    "hard": [
        "Design a URL shortening service that handles millions of requests per day. Discuss storage, hashing, and scaling.",
        "Walk through how you would break a large monolith into services without downtime.",
    ],
}

ROLE_BANKS: Dict[str, QuestionBank] = {
    "Full-Stack Developer": {
        "easy": [
            "What is the difference between let, const, and var in JavaScript?",
            "Explain the concept of props in React.",
        ],
        "medium": [
            "How does the event loop work in Node.js?",
            "Explain React hooks and when to use useState vs useEffect.",
        ],
        "hard": [
            "Design a scalable REST API architecture for a social media platform. Discuss authentication, rate limiting, and database design.",
            "Explain how you would optimize a React application that has performance issues. Discuss code splitting, memoization, and bundle optimization.",
        ],
    },
    "Frontend Developer": {
        "easy": [
            "What is the CSS box model?",
            "What is the difference between == and === in JavaScript?",
        ],
        "medium": [
            "How does the virtual DOM improve rendering performance?",
            "Explain event delegation and when you would use it.",
        ],
        "hard": [
            "How would you architect state management for a large single-page application with offline support?",
            "Describe how you would diagnose and fix a slow first contentful paint on a production site.",
        ],
    },
    "Backend Developer": {
        "easy": [
            "What is the difference between GET and POST requests?",
            "What is a database index and why is it useful?",
        ],
        "medium": [
            "How do you make an API endpoint idempotent?",
            "Explain database transactions and isolation levels.",
        ],
        "hard": [
            "Design a rate limiter for a public API serving millions of clients.",
            "How would you design a job queue that guarantees at-least-once processing?",
        ],
    },
    "Machine Learning Engineer": {
        "easy": [
            "What is the difference between supervised and unsupervised learning?",
            "What is overfitting and how can you detect it?",
        ],
        "medium": [
            "Explain the bias-variance trade-off with an example.",
            "How would you handle a heavily imbalanced classification dataset?",
        ],
        "hard": [
            "Design a pipeline that retrains and redeploys a model safely when data drifts.",
            "How would you serve a large model with strict latency requirements?",
        ],
    },
    "Data Scientist": {
        "easy": [
            "What is a p-value?",
            "Explain the difference between mean and median and when each is preferable.",
        ],
        "medium": [
            "How would you design an A/B test for a new checkout flow?",
            "Explain regularization and how L1 differs from L2.",
        ],
        "hard": [
            "How would you estimate the causal effect of a feature launched without an experiment?",
            "Design a churn prediction project from problem framing to deployment.",
        ],
    },
    "DevOps Engineer": {
        "easy": [
            "What is the difference between a container and a virtual machine?",
            "What does a CI pipeline typically do?",
        ],
        "medium": [
            "How would you roll out a release with zero downtime?",
            "Explain how you would manage secrets in a Kubernetes cluster.",
        ],
        "hard": [
            "Design the monitoring and alerting strategy for a multi-region service.",
            "Walk through your response to a production outage caused by a bad deploy.",
        ],
    },
    "Data Analyst": {
        "easy": [
            "What is the difference between INNER JOIN and LEFT JOIN?",
            "When would you use a bar chart instead of a line chart?",
        ],
        "medium": [
            "How do you deal with missing values in a dataset?",
            "Explain window functions in SQL with an example.",
        ],
        "hard": [
            "A key metric dropped 20% overnight. How do you investigate?",
            "Design a dashboard for executives tracking product health. Which metrics and why?",
        ],
    },
}


def bank_for(job_role: str) -> QuestionBank:
    return ROLE_BANKS.get(job_role, GENERIC_BANK)


def fallback_question(
    job_role: str,
    difficulty: str,
    question_number: int,
    offset: int = 0,
) -> Question:
    """Pick a canned question for ``(job_role, difficulty)``.

    Consecutive question numbers map to consecutive bank entries, so the two
    questions of a tier differ when they share an ``offset``.
    """

    candidates = bank_for(job_role).get(difficulty) or GENERIC_BANK[difficulty]
    text = candidates[(offset + question_number) % len(candidates)]
    return Question(text=text, difficulty=difficulty, time_limit=time_limit_for(difficulty))


def heuristic_score(answer: Optional[str]) -> int:
    """Score an answer by length alone: 2 below 10 chars, 5 below 50, else 7."""

    length = len(answer.strip()) if answer else 0
    if length < 10:
        return 2
    if length < 50:
        return 5
    return 7


SUMMARY_TIERS = (
    (80, "Excellent performance! Strong technical knowledge across all difficulty levels."),
    (60, "Good performance with solid understanding of core concepts. Some areas for improvement in advanced topics."),
    (40, "Average performance. Needs improvement in technical depth and problem-solving skills."),
    (0, "Below expectations. Significant gaps in fundamental knowledge. Recommend further study and practice."),
)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def summary_for_score(final_score: int) -> str:
    for threshold, text in SUMMARY_TIERS:
        if final_score >= threshold:
            return text
    return SUMMARY_TIERS[-1][1]


def fallback_summary(scores: Sequence[int]) -> SummaryResult:
    if scores:
        final_score = round_half_up(sum(scores) * 10 / len(scores))
    else:
        final_score = 0
    final_score = max(0, min(100, final_score))
    return SummaryResult(final_score=final_score, summary=summary_for_score(final_score))


__all__ = [
    "GENERIC_BANK",
    "ROLE_BANKS",
    "bank_for",
    "fallback_question",
    "heuristic_score",
    "SUMMARY_TIERS",
    "round_half_up",
    "summary_for_score",
    "fallback_summary",
]

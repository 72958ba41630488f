"""
Prompts for the external analysis collaborator.
"""

from typing import Optional
import json

from jobmatch.core.models import JobPosting, MatchReport, ResumeProfile


ANALYSIS_SYSTEM_PROMPT = """You are a recruiting assistant that evaluates job candidates against job postings.

You receive a candidate's structured resume data and a job posting. Judge how well the
candidate meets the job's requirements, looking at skills, experience, education and overall fit.

Respond with ONLY a JSON object using exactly this schema:
{
  "matchPercentage": integer 0-100, overall match,
  "summary": string, a 1-2 sentence evaluation,
  "requiredSkillsMatch": integer 0-100, share of required skills the candidate has,
  "preferredSkillsMatch": integer 0-100, share of preferred skills the candidate has,
  "matchingSkills": [string], candidate skills that meet the job's skill lists,
  "missingRequiredSkills": [string], required skills the candidate lacks,
  "experienceRelevance": integer 0-100, relevance of the candidate's experience,
  "experienceAnalysis": string, a short assessment of the experience,
  "strengths": [string], 3-5 strengths for this role,
  "weaknesses": [string], 3-5 gaps against this role,
  "suggestedInterviewQuestions": [string], 3-5 questions to probe fit
}

No markdown, no commentary outside the JSON object."""


ANALYSIS_USER_TEMPLATE = """Analyze this candidate for the job below.

CANDIDATE RESUME DATA:
{resume}

JOB POSTING:
{job}"""


IMPROVEMENT_SYSTEM_PROMPT = """You are a resume consultant. Compare the candidate's resume with the job
requirements and the current match analysis, and suggest concrete changes that would improve
the match. Concentrate on missing skills and experience gaps.

Respond with ONLY a JSON object using exactly this schema:
{
  "summaryOfGaps": string, the key gaps in one paragraph,
  "skillSuggestions": [string], skills to add or emphasize,
  "experienceSuggestions": [string], ways to surface or gain relevant experience,
  "resumeFormattingSuggestions": [string], formatting changes,
  "keywordSuggestions": [string], job-specific keywords to include,
  "improvementPriorities": [string], the suggestions above, most important first
}"""


IMPROVEMENT_USER_TEMPLATE = """CANDIDATE RESUME DATA:
{resume}

JOB POSTING:
{job}

CURRENT MATCH ANALYSIS:
{report}"""


def _dump(data: dict) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def build_analysis_prompt(resume: ResumeProfile, job: JobPosting) -> tuple[str, str]:
    """Return the (system, user) prompt pair for a match analysis."""
    user = ANALYSIS_USER_TEMPLATE.format(resume=_dump(resume.to_dict()), job=_dump(job.to_dict()))
    return ANALYSIS_SYSTEM_PROMPT, user


def build_improvement_prompt(
    resume: ResumeProfile,
    job: JobPosting,
    report: Optional[MatchReport] = None,
) -> tuple[str, str]:
    """Return the (system, user) prompt pair for resume improvement suggestions."""
    user = IMPROVEMENT_USER_TEMPLATE.format(
        resume=_dump(resume.to_dict()),
        job=_dump(job.to_dict()),
        report=_dump(report.to_dict()) if report else "{}",
    )
    return IMPROVEMENT_SYSTEM_PROMPT, user

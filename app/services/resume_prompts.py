from __future__ import annotations

from dataclasses import dataclass

from app.ai.types import ChatMessage


@dataclass(frozen=True)
class ImprovementTool:
    id: str
    title: str
    description: str


IMPROVEMENT_TOOLS: tuple[ImprovementTool, ...] = (
    ImprovementTool("wording", "Resume Wording Improver", "Rewrite with powerful action verbs"),
    ImprovementTool("ats", "ATS Score Analyzer", "Get your ATS compatibility score"),
    ImprovementTool("keywords", "Keyword Optimizer", "Find and add missing keywords"),
    ImprovementTool("grammar", "Grammar & Clarity Enhancer", "Polish your writing"),
    ImprovementTool("bullets", "Bullet Point Strengthener", "Create impactful bullet points"),
    ImprovementTool("summary", "Resume Summary Generator", "Craft compelling summaries"),
    ImprovementTool("skills", "Skills Recommendation", "Discover skills to add"),
    ImprovementTool("matching", "Job Role Matching", "See how well you match"),
)
TOOL_IDS = frozenset(tool.id for tool in IMPROVEMENT_TOOLS)

JOB_ROLES = (
    "Software Engineer",
    "Product Manager",
    "Data Scientist",
    "UX Designer",
    "Marketing Manager",
    "Sales Representative",
    "Project Manager",
    "Business Analyst",
    "DevOps Engineer",
    "Full Stack Developer",
    "Other",
)

INDUSTRIES = (
    "Technology",
    "Finance",
    "Healthcare",
    "Education",
    "E-commerce",
    "Manufacturing",
    "Consulting",
    "Media & Entertainment",
    "Real Estate",
    "Other",
)

EXPERIENCE_LEVELS = ("student", "fresher", "professional")

PLAIN_TEXT_RULES = """
CRITICAL OUTPUT RULES:
1. Output ONLY plain text - NO markdown formatting whatsoever
2. REMOVE these symbols: *, **, _, __, #, ###, ~~, •, ◦, ▪, ▫, →, ⇒, ←, —
3. Use simple line breaks between sections (no decorative dividers)
4. Use line-separated sentences instead of bullet points
5. Format must be clean and professional, suitable for direct PDF generation
6. ALWAYS output the ENTIRE resume, not just modified sections"""


class UnknownToolError(ValueError):
    pass


def _wording(resume: str, job_role: str, experience_level: str, industry: str) -> tuple[str, str]:
    system = (
        "You are an expert resume writer. Rewrite resume content to be more impactful and professional.\n"
        f"{PLAIN_TEXT_RULES}\n\n"
        "Guidelines:\n"
        "- Use strong action verbs (Led, Developed, Implemented, Achieved, Delivered)\n"
        "- Quantify achievements with numbers and metrics where possible\n"
        "- Keep all information truthful - only enhance wording, never invent experience\n"
        "- Optimize for ATS with role-relevant keywords\n"
        f"- Tailor language for {job_role} in {industry}\n"
        f"- Adjust tone for {experience_level} level\n"
        "- Do NOT modify contact details, education dates, or institution names\n\n"
        "Resume Structure to follow:\n"
        "Name\nContact Information\nProfessional Summary\nEducation\nSkills\nProjects\n"
        "Experience / Internships\nAchievements / Certifications (if present)"
    )
    user = (
        "Rewrite and improve this resume. Return the FULL, FINAL, CORRECTED VERSION "
        f"in clean plain text format:\n\n{resume}"
    )
    return system, user


def _ats(resume: str, job_role: str, experience_level: str, industry: str) -> tuple[str, str]:
    system = f"You are an ATS (Applicant Tracking System) expert. Analyze resumes for ATS compatibility.\n{PLAIN_TEXT_RULES}"
    user = (
        f"Analyze this resume for ATS compatibility for a {job_role} position in {industry}.\n\n"
        "Format your response as:\n\n"
        "ATS READINESS SCORE: [X]%\n\n"
        "STRENGTHS\n[List 3-5 strengths, one per line]\n\n"
        "AREAS FOR IMPROVEMENT\n[List 3-5 areas, one per line]\n\n"
        f"MISSING KEYWORDS\n[List important keywords for {job_role} that are missing, one per line]\n\n"
        "RECOMMENDATIONS\n[List 3-5 specific recommendations, one per line]\n\n"
        f"Resume to analyze:\n{resume}"
    )
    return system, user


def _keywords(resume: str, job_role: str, experience_level: str, industry: str) -> tuple[str, str]:
    system = f"You are a keyword optimization expert for resumes.\n{PLAIN_TEXT_RULES}"
    user = (
        f"Analyze this resume for a {job_role} position in {industry} at {experience_level} level.\n\n"
        "Format your response as:\n\n"
        "KEYWORDS PRESENT\n[List keywords found, one per line]\n\n"
        "MISSING KEYWORDS\n[List missing important keywords, one per line]\n\n"
        "HOW TO INCORPORATE\n[Provide suggestions in plain sentences, one per line]\n\n"
        f"Resume:\n{resume}"
    )
    return system, user


def _grammar(resume: str, job_role: str, experience_level: str, industry: str) -> tuple[str, str]:
    system = (
        "You are a professional editor specializing in resume writing. Fix grammar and improve clarity.\n"
        f"{PLAIN_TEXT_RULES}"
    )
    user = (
        "Review and enhance the grammar and clarity of this resume. "
        f"Return the FULL corrected resume in clean plain text:\n\n{resume}"
    )
    return system, user


def _bullets(resume: str, job_role: str, experience_level: str, industry: str) -> tuple[str, str]:
    system = (
        "You are an expert at crafting powerful resume content. "
        "Transform weak statements into compelling achievements.\n"
        f"{PLAIN_TEXT_RULES}"
    )
    user = (
        f"Transform this resume content to be more impactful for a {job_role} in {industry}. "
        "Use strong action verbs and the STAR method where applicable. "
        f"Return the FULL improved resume in clean plain text:\n\n{resume}"
    )
    return system, user


def _summary(resume: str, job_role: str, experience_level: str, industry: str) -> tuple[str, str]:
    system = f"You are a career branding expert. Create compelling professional summaries.\n{PLAIN_TEXT_RULES}"
    user = (
        f"Create 2-3 powerful professional summary variations for a {experience_level} level "
        f"{job_role} in {industry}.\n\n"
        "Format as:\n\n"
        "SUMMARY OPTION 1\n[3-4 sentences]\n\n"
        "SUMMARY OPTION 2\n[3-4 sentences]\n\n"
        "SUMMARY OPTION 3\n[3-4 sentences]\n\n"
        f"Base it on this resume:\n{resume}"
    )
    return system, user


def _skills(resume: str, job_role: str, experience_level: str, industry: str) -> tuple[str, str]:
    system = f"You are a career advisor who understands industry skills and trends.\n{PLAIN_TEXT_RULES}"
    user = (
        f"Based on this resume for a {job_role} in {industry} at {experience_level} level, "
        "suggest skills to add.\n\n"
        "Format your response as:\n\n"
        "TECHNICAL SKILLS TO ADD\n[Skills mentioned or implied but not listed, one per line]\n\n"
        "SOFT SKILLS TO HIGHLIGHT\n[Based on experience described, one per line]\n\n"
        "TRENDING SKILLS FOR THIS ROLE\n[Current in-demand skills, one per line]\n\n"
        "CERTIFICATIONS TO CONSIDER\n[Relevant certifications, one per line]\n\n"
        f"Resume:\n{resume}"
    )
    return system, user


def _matching(resume: str, job_role: str, experience_level: str, industry: str) -> tuple[str, str]:
    system = f"You are a job matching analyst. Evaluate resume fit for specific roles.\n{PLAIN_TEXT_RULES}"
    user = (
        f"Analyze how well this resume matches a {job_role} position in {industry}.\n\n"
        "Format your response as:\n\n"
        "MATCH SCORE: [X]%\n\n"
        "STRONG MATCHES\n[List matching qualifications, one per line]\n\n"
        "GAPS TO ADDRESS\n[List missing qualifications, one per line]\n\n"
        "RECOMMENDATIONS\n[Specific suggestions to improve match, one per line]\n\n"
        f"Resume:\n{resume}"
    )
    return system, user


_PROMPT_BUILDERS = {
    "wording": _wording,
    "ats": _ats,
    "keywords": _keywords,
    "grammar": _grammar,
    "bullets": _bullets,
    "summary": _summary,
    "skills": _skills,
    "matching": _matching,
}


def build_improvement_messages(
    tool: str,
    resume: str,
    *,
    job_role: str,
    experience_level: str,
    industry: str,
) -> list[ChatMessage]:
    builder = _PROMPT_BUILDERS.get((tool or "").strip().lower())
    if builder is None:
        raise UnknownToolError("Invalid tool specified")
    system, user = builder(resume, job_role, experience_level, industry)
    return [
        ChatMessage(role="system", content=system),
        ChatMessage(role="user", content=user),
    ]

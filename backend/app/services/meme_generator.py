"""Memes: rotación diaria, selección aleatoria y plantillas por tramo de riesgo.

Todo son selecciones sobre listas estáticas. La única "lógica" con estado es
el meme diario, que usa el día del año módulo la longitud de la rotación para
que todas las peticiones del mismo día reciban el mismo meme.
"""

from __future__ import annotations

import logging
import random
import time
from datetime import date, datetime, timezone
from typing import Dict, List, Sequence

from app.core.enums import RiskTier
from app.core.errors import NotFoundError
from app.models.job import JobRecord
from app.models.meme import GeneratedMeme, MemeRecord
from app.models.requests import FavoriteJob, SearchHistoryEntry

logger = logging.getLogger(__name__)

MEME_DATABASE: List[MemeRecord] = [
    MemeRecord(id=1, title="When you realize ChatGPT can do your job better than you...",
               content="🔥 Plot twist: It already is. 🔥",
               category="AI Reality Check", viral_score=95),
    MemeRecord(id=2, title="Me explaining to my boss why AI won't replace me",
               content="Meanwhile, AI is already doing my job...",
               category="Workplace Humor", viral_score=88),
    MemeRecord(id=3, title="Job security in 2024:",
               content="🤖 AI: 'I can do that' 👨‍💼 You: 'But I have experience!' 🤖 AI: 'I can learn in 2 seconds'",
               category="AI vs Human", viral_score=92),
    MemeRecord(id=4, title="My job description vs What AI actually does:",
               content="📝 Me: 'Complex analysis and strategic thinking' 🤖 AI: *Does it in 0.3 seconds*",
               category="Job Reality", viral_score=87),
    MemeRecord(id=5, title="When you finally learn to code to future-proof your career",
               content="💻 You: 'Now I'm safe!' 🤖 GitHub Copilot: 'Allow me to introduce myself...'",
               category="Tech Humor", viral_score=90),
    MemeRecord(id=6, title="The three stages of job automation grief:",
               content="😤 Denial → 😰 Panic → 😅 Acceptance → 🤖 Learning to code",
               category="Career Stages", viral_score=85),
    MemeRecord(id=7, title="AI replacing jobs be like:",
               content="👨‍💼 'I have 10 years of experience!' 🤖 'I have 10 seconds of training data!'",
               category="Experience vs AI", viral_score=93),
    MemeRecord(id=8, title="My LinkedIn after AI takes my job:",
               content="🔗 'Open to work' → 'Open to learning AI' → 'Open to becoming AI'",
               category="Career Pivot", viral_score=89),
    MemeRecord(id=9, title="When you check ismyjobcooked.com and see 95% automation risk:",
               content="😱 *Panic* → 😤 *Denial* → 😅 *Acceptance* → 🚀 *Time to pivot*",
               category="Reality Check", viral_score=91),
    MemeRecord(id=10, title="The future of work:",
               content="🤖 AI does the work 👨‍💼 Human supervises AI 🤖 AI supervises human 👨‍💼 Human becomes AI",
               category="Future Work", viral_score=86),
    MemeRecord(id=11, title="Job interview in 2025:",
               content="👔 'What's your experience with AI?' 👨‍💼 'I survived the automation wave of 2024'",
               category="Future Interviews", viral_score=88),
    MemeRecord(id=12, title="When AI writes better code than you:",
               content="💻 You: *Spends 4 hours debugging* 🤖 AI: *Writes perfect code in 30 seconds*",
               category="Developer Humor", viral_score=94),
    MemeRecord(id=13, title="The automation timeline:",
               content="2024: AI helps with tasks → 2025: AI does most tasks → 2026: AI does all tasks → 2027: AI creates new tasks for humans",
               category="Timeline", viral_score=87),
    MemeRecord(id=14, title="My resume after AI takes over:",
               content="📄 'Proficient in Microsoft Office' → 'Proficient in ChatGPT' → 'Proficient in not being replaced by AI'",
               category="Resume Evolution", viral_score=90),
    MemeRecord(id=15, title="When you realize your job is 'cooked':",
               content="🔥 'Well-done' → 'Burnt' → 'Ashes' → 'Time to become a prompt engineer'",
               category="Career Crisis", viral_score=92),
]

# Plantillas (título, contenido, categoría) por tramo para memes de un puesto
JOB_MEME_TEMPLATES: Dict[RiskTier, List[tuple[str, str, str]]] = {
    RiskTier.HIGH: [
        ("When you realize your job is 90% automated:",
         "🤖 AI: 'I got this' 👨‍💼 You: 'But I have 10 years of experience!' 🤖 AI: 'I learned this in 10 seconds'",
         "High Risk Reality Check"),
        ("Job security in 2024:",
         "📉 Going down faster than my motivation to learn new skills",
         "Career Crisis"),
        ("My job description vs What AI actually does:",
         "📝 Me: 'Complex analysis and strategic thinking' 🤖 AI: *Does it in 0.3 seconds*",
         "Job Reality"),
    ],
    RiskTier.MEDIUM: [
        ("AI can do parts of my job, but not the important stuff:",
         "😅 You're safe... for now",
         "Medium Risk Humor"),
        ("When AI tries to replace you but fails:",
         "🤖 AI: 'I can handle this' 👨‍💼 You: 'Good luck with the client meetings'",
         "AI vs Human"),
        ("My career path:",
         "👨‍💼 Human → 🤖 AI Assistant → 🤖 AI Supervisor → 🤖 AI",
         "Career Evolution"),
    ],
    RiskTier.LOW: [
        ("AI-proof job status:",
         "😎 You're safe! AI still can't handle the human touch",
         "Low Risk Celebration"),
        ("When you're the one building the AI:",
         "💻 You: 'I'm creating the tools that will replace everyone else' 😈",
         "Tech Humor"),
        ("Job security level:",
         "🛡️ AI-proof! Time to become the robot whisperer",
         "Job Security"),
    ],
}

# Plantillas para `POST /api/memes/generate`; {job} y {score} se rellenan
CUSTOM_MEME_TEMPLATES: Dict[RiskTier, List[tuple[str, str]]] = {
    RiskTier.HIGH: [
        ("When you realize {job} is {score}% automated:",
         "🤖 AI: 'I got this' 👨‍💼 You: 'But I went to college!' 🤖 AI: 'I learned this in 2 minutes'"),
        ("{job} job security in 2024:",
         "📉 Going down faster than my motivation to learn new skills"),
    ],
    RiskTier.MEDIUM: [
        ("{job} automation status:",
         "😅 AI can do parts of it, but not the important stuff... yet"),
        ("My {job} career path:",
         "👨‍💼 Human → 🤖 AI Assistant → 🤖 AI Supervisor → 🤖 AI"),
    ],
    RiskTier.LOW: [
        ("{job} automation risk:",
         "😎 AI-proof job! Time to become the one who builds the AI"),
        ("{job} job security:",
         "🛡️ You're safe! AI still can't handle the human touch"),
    ],
}

TRENDING_TEMPLATES: List[tuple[str, str, str]] = [
    ("Latest AI breakthrough:",
     "🤖 AI: 'I can now do your job' 👨‍💼 You: 'But I have a degree!' 🤖 AI: 'I have access to all degrees'",
     "AI Breakthrough"),
    ("When your company announces 'AI integration':",
     "😱 Translation: 'We're replacing humans with robots'",
     "Company News"),
    ("Job market in 2024:",
     "📈 AI jobs: Up 500% 📉 Human jobs: Down 50% 😅 Your job: Somewhere in between",
     "Market Trends"),
    ("When you see your job listed as 'AI-proof':",
     "😎 You: 'I'm safe!' 🤖 AI: 'Challenge accepted'",
     "Job Security"),
    ("The automation paradox:",
     "🤖 AI creates jobs → 🤖 AI takes jobs → 🤖 AI creates more jobs → 🤖 AI takes more jobs",
     "Automation Paradox"),
]

PLATFORM_TEMPLATES: Dict[str, List[tuple[str, str, str]]] = {
    "twitter": [
        ("🔥 HOT TAKE 🔥",
         "Your job is probably already automated and you don't even know it.",
         "Twitter Hot Take"),
        ("Thread: Why your job is cooked 🧵",
         "1/ AI can do it faster\n2/ AI can do it cheaper\n3/ AI doesn't need coffee breaks\n"
         "4/ AI doesn't call in sick\n5/ AI doesn't ask for raises",
         "Twitter Thread"),
    ],
    "tiktok": [
        ("POV: You just found out your job is 90% automated",
         "😱 *Panic* → 😤 *Denial* → 😅 *Acceptance* → 🚀 *Time to learn coding*",
         "TikTok POV"),
        ("The automation dance 💃",
         "🤖 AI: *Does your job perfectly* 👨‍💼 You: *Still gets paid* 💃 *Dance break*",
         "TikTok Dance"),
    ],
    "linkedin": [
        ("Professional insight on job automation trends",
         "The future of work is evolving rapidly. Those who adapt to AI collaboration will thrive. "
         "#FutureOfWork #AI #CareerDevelopment",
         "LinkedIn Professional"),
        ("Thought leadership moment",
         "Instead of fearing AI, let's focus on how we can leverage it to enhance our human "
         "capabilities. #AI #Innovation #Leadership",
         "LinkedIn Thought Leadership"),
    ],
}

FUNNY_SUMMARIES: Dict[RiskTier, List[str]] = {
    RiskTier.HIGH: [
        "Bad news chief... GPT just did your annual report in 12 seconds and didn't even ask for coffee.",
        "Oof. Even a potato could do this job better. Actually, a potato probably IS doing this job now.",
        "The robots are already doing this better than you. Time to learn how to code or become a robot whisperer.",
        "AI can handle {risk}% of your daily tasks. The other {rest}% is just pretending to be busy.",
    ],
    RiskTier.MEDIUM: [
        "AI can do parts of this job, but not the important stuff. You're safe... for now.",
        "ChatGPT is already handling complaints better than humans. At least it doesn't need therapy.",
        "AI can make logos now, but it still can't argue with clients about why Comic Sans is a terrible choice.",
        "Surprisingly, humans are still better at this. Who knew?",
    ],
    RiskTier.LOW: [
        "Plot twist: You're the one cooking everyone else's jobs. Congrats, you're basically a digital chef.",
        "Robots can't give hugs or deal with bodily fluids with the same grace. You're basically irreplaceable.",
        "AI can research cases but can't bill clients for breathing. Your job security is measured in billable hours.",
        "This job is basically AI-proof. Congratulations!",
    ],
}


def _viral_score(low: int = 80, high: int = 99) -> int:
    return random.randint(low, high)


def _format_score(score: float) -> str:
    return str(int(score)) if float(score).is_integer() else str(score)


def day_of_year(today: date) -> int:
    """1 para el 1 de enero."""
    return today.timetuple().tm_yday


def daily_meme(today: date | None = None, rotation: Sequence[MemeRecord] = MEME_DATABASE) -> GeneratedMeme:
    """Mismo meme para todo el día: `rotation[día_del_año % len(rotation)]`."""
    today = today or datetime.now(timezone.utc).date()
    day = day_of_year(today)
    meme = rotation[day % len(rotation)]
    logger.info("Daily meme generated for day %d: %s", day, meme.title)
    return GeneratedMeme(
        id=day,
        title=meme.title,
        content=meme.content,
        category=meme.category,
        viral_score=meme.viral_score,
        is_daily=True,
        day_of_year=day,
    )


def random_meme() -> MemeRecord:
    return random.choice(MEME_DATABASE)


def category_slug(category: str) -> str:
    return "-".join(category.lower().split())


def memes_by_category(category: str) -> List[MemeRecord]:
    """Filtra por slug ("ai-vs-human"); lanza NotFoundError si no hay ninguno."""
    wanted = category.strip().lower()
    memes = [meme for meme in MEME_DATABASE if category_slug(meme.category) == wanted]
    if not memes:
        raise NotFoundError(
            f"No memes found in category: {category}",
            extra={"availableCategories": meme_categories()},
        )
    return memes


def meme_categories() -> List[str]:
    return list(dict.fromkeys(meme.category for meme in MEME_DATABASE))


def trending_memes(limit: int = 5) -> List[MemeRecord]:
    return sorted(MEME_DATABASE, key=lambda meme: meme.viral_score, reverse=True)[:limit]


def all_memes() -> dict:
    return {
        "memes": [meme.to_json_dict() for meme in MEME_DATABASE],
        "count": len(MEME_DATABASE),
        "categories": meme_categories(),
        "averageViralScore": int(
            sum(meme.viral_score for meme in MEME_DATABASE) / len(MEME_DATABASE) + 0.5
        ),
    }


def generate_custom_meme(
    job_title: str, cooked_score: float, mood: str = "neutral", platform: str | None = None
) -> GeneratedMeme:
    tier = RiskTier.from_score(cooked_score)
    title, content = random.choice(CUSTOM_MEME_TEMPLATES[tier])
    meme = GeneratedMeme(
        id=int(time.time() * 1000),
        title=title.format(job=job_title, score=_format_score(cooked_score)),
        content=content,
        category="Custom Generated",
        viral_score=_viral_score(),
        job_title=job_title,
        cooked_score=cooked_score,
        mood=mood,
        platform=platform,
    )
    logger.info("Custom meme generated for %s (%s tier)", job_title, tier.value)
    return meme


def generate_job_specific_meme(job: JobRecord) -> GeneratedMeme:
    """Meme a partir de una ficha analizada; "your job" se sustituye por el título."""
    tier = RiskTier.from_score(job.automation_risk)
    title, content, category = random.choice(JOB_MEME_TEMPLATES[tier])
    meme = GeneratedMeme(
        title=title.replace("your job", job.title),
        content=content,
        category=category,
        viral_score=_viral_score(),
        job_title=job.title,
        automation_risk=job.automation_risk,
        job_category=job.category,
    )
    logger.info("Job-specific meme generated for %s: %s", job.title, meme.title)
    return meme


def generate_trending_meme() -> GeneratedMeme:
    title, content, category = random.choice(TRENDING_TEMPLATES)
    return GeneratedMeme(
        id=int(time.time() * 1000),
        title=title,
        content=content,
        category=category,
        viral_score=_viral_score(85, 99),
        is_trending=True,
    )


def generate_personalized_meme(
    favorite_jobs: Sequence[FavoriteJob] = (),
    search_history: Sequence[SearchHistoryEntry] = (),
) -> GeneratedMeme:
    if favorite_jobs:
        job = random.choice(list(favorite_jobs))
        verdict = "Time to pivot!" if job.automation_risk >= 70 else "You might be safe... for now."
        content = f"Your favorite job ({job.title}) is {job.automation_risk}% automated. {verdict}"
    elif search_history:
        recent = search_history[-1]
        verdict = (
            "That job is cooked! 🔥"
            if recent.cooked_score >= 70
            else "That job might survive the AI apocalypse."
        )
        content = f"You recently searched for '{recent.job_title}'. {verdict}"
    else:
        content = (
            "Based on your search patterns, you're clearly worried about AI taking your job. "
            "Smart thinking! 🤖"
        )
    logger.info("Personalized meme generated")
    return GeneratedMeme(
        title="Your personalized job automation status:",
        content=content,
        category="Personalized",
        viral_score=_viral_score(),
        is_personalized=True,
    )


def generate_platform_meme(platform: str, job: JobRecord | None = None) -> GeneratedMeme:
    """Plataformas sin plantillas propias reciben las de Twitter."""
    key = platform.strip().lower()
    templates = PLATFORM_TEMPLATES.get(key, PLATFORM_TEMPLATES["twitter"])
    title, content, category = random.choice(templates)
    meme = GeneratedMeme(
        title=title,
        content=content,
        category=category,
        viral_score=_viral_score(),
        platform=key,
        job_title=job.title if job else None,
        automation_risk=job.automation_risk if job else None,
    )
    logger.info("Platform-specific meme generated for %s", key)
    return meme


def funny_summary(job: JobRecord) -> str:
    """Frase graciosa para la respuesta del análisis, según el tramo de riesgo."""
    tier = RiskTier.from_score(job.automation_risk)
    template = random.choice(FUNNY_SUMMARIES[tier])
    return template.format(risk=job.automation_risk, rest=100 - job.automation_risk)

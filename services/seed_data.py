"""
Demo data used to seed an empty store.
Pass a seeded random.Random for repeatable output.
"""
import datetime
import random
from typing import Any, Dict, List, Optional

from models.enums import STAGE_ORDER, JobStatus, JobType, TimelineAction
from services.common import slugify

JOB_TITLES = [
    "Senior Frontend Developer",
    "Backend Engineer",
    "Full Stack Developer",
    "DevOps Engineer",
    "Product Manager",
    "UX Designer",
    "Data Scientist",
    "Mobile Developer",
    "QA Engineer",
    "Technical Lead",
    "Software Architect",
    "Marketing Manager",
    "Sales Representative",
    "Customer Success Manager",
    "HR Specialist",
    "Financial Analyst",
    "Operations Manager",
    "Content Writer",
    "Graphic Designer",
    "Business Analyst",
    "Project Manager",
    "Security Engineer",
    "Machine Learning Engineer",
    "Cloud Engineer",
    "Site Reliability Engineer",
]
TAGS = ["Remote", "On-site", "Hybrid", "Senior", "Junior", "Mid-level", "Urgent", "New"]
LOCATIONS = ["New York", "San Francisco", "London", "Berlin", "Toronto", "Remote"]
REQUIREMENTS = [
    "3+ years of experience",
    "Strong communication skills",
    "Team player",
    "Problem-solving abilities",
]

FIRST_NAMES = [
    "John", "Jane", "Michael", "Sarah", "David", "Emily", "Robert", "Lisa", "James",
    "Maria", "William", "Jennifer", "Richard", "Linda", "Joseph", "Elizabeth", "Thomas",
    "Barbara", "Christopher", "Susan", "Daniel", "Jessica", "Matthew", "Karen",
    "Anthony", "Nancy",
]
LAST_NAMES = [
    "Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller", "Davis",
    "Rodriguez", "Martinez", "Hernandez", "Lopez", "Gonzalez", "Wilson", "Anderson",
    "Thomas", "Taylor", "Moore", "Jackson", "Martin", "Lee", "Perez", "Thompson",
    "White", "Harris", "Sanchez",
]
STAGE_NOTES = ["Moved to {0} stage", "Progressing to {0}", "Advanced to {0} phase", "Updated status to {0}"]
RANDOM_NOTES = [
    "Great communication skills during interview",
    "Strong technical background",
    "Good cultural fit for the team",
    "Needs to improve on specific areas",
    "Excellent problem-solving approach",
    "Follow up on reference checks",
    "Schedule next round of interviews",
]

DAY = datetime.timedelta(days=1)


def _iso(moment: datetime.datetime) -> str:
    return moment.isoformat()


def generate_jobs(rng: random.Random, now: datetime.datetime, count: int = 25) -> List[Dict[str, Any]]:
    jobs = []
    for index, title in enumerate(JOB_TITLES[:count]):
        jobs.append({
            "id": str(index + 1),
            "title": title,
            "slug": slugify(title),
            "status": JobStatus.ACTIVE.value if rng.random() > 0.3 else JobStatus.ARCHIVED.value,
            "tags": TAGS[:rng.randint(1, 3)],
            "order": index + 1,
            "description": f"We are looking for a talented {title} to join our growing team.",
            "requirements": list(REQUIREMENTS),
            "location": rng.choice(LOCATIONS),
            "type": rng.choice([t.value for t in JobType]),
            "created_at": _iso(now - rng.random() * 30 * DAY),
            "updated_at": _iso(now),
        })
    return jobs


def generate_candidates(
    rng: random.Random, now: datetime.datetime, jobs: List[Dict[str, Any]], count: int = 1000
) -> List[Dict[str, Any]]:
    candidates = []
    for index in range(count):
        first = rng.choice(FIRST_NAMES)
        last = rng.choice(LAST_NAMES)
        candidates.append({
            "id": str(index + 1),
            "name": f"{first} {last}",
            "email": f"{first.lower()}.{last.lower()}@email.com",
            "stage": rng.choice(STAGE_ORDER),
            "job_id": rng.choice(jobs)["id"],
            "phone": f"+1-555-{rng.randint(1000, 9999)}",
            "notes": None,
            "created_at": _iso(now - rng.random() * 60 * DAY),
            "updated_at": _iso(now),
        })
    return candidates


def build_assessment(job: Dict[str, Any], timestamp: str) -> Dict[str, Any]:
    """The demo assessment: two sections, one question shown only for remote candidates."""
    jid = job["id"]
    return {
        "id": f"assessment-{jid}",
        "job_id": jid,
        "title": f"{job['title']} Assessment",
        "description": f"Technical assessment for {job['title']} position",
        "sections": [
            {
                "id": f"section-1-{jid}",
                "title": "Technical Skills",
                "description": "Evaluate technical competencies",
                "questions": [
                    {
                        "id": f"q1-{jid}",
                        "type": "single-choice",
                        "question": "How many years of experience do you have?",
                        "required": True,
                        "options": ["0-1 years", "2-3 years", "4-5 years", "6+ years"],
                    },
                    {
                        "id": f"q2-{jid}",
                        "type": "multi-choice",
                        "question": "Which technologies are you proficient in?",
                        "required": True,
                        "options": ["JavaScript", "TypeScript", "React", "Node.js", "Python", "Java"],
                    },
                    {
                        "id": f"q3-{jid}",
                        "type": "long-text",
                        "question": "Describe a challenging project you worked on.",
                        "required": True,
                        "validation": {"min_length": 100, "max_length": 1000},
                    },
                ],
            },
            {
                "id": f"section-2-{jid}",
                "title": "Problem Solving",
                "questions": [
                    {
                        "id": f"q4-{jid}",
                        "type": "short-text",
                        "question": "What is your preferred programming language?",
                        "required": False,
                        "validation": {"max_length": 50},
                    },
                    {
                        "id": f"q5-{jid}",
                        "type": "numeric",
                        "question": "Rate your problem-solving skills (1-10)",
                        "required": True,
                        "validation": {"min": 1, "max": 10},
                    },
                    {
                        "id": f"q6-{jid}",
                        "type": "single-choice",
                        "question": "Are you available for remote work?",
                        "required": True,
                        "options": ["Yes", "No", "Hybrid preferred"],
                    },
                    {
                        "id": f"q7-{jid}",
                        "type": "short-text",
                        "question": "If yes, what is your preferred remote work setup?",
                        "required": False,
                        "conditional_logic": {
                            "depends_on": f"q6-{jid}",
                            "condition": "equals",
                            "value": "Yes",
                        },
                    },
                ],
            },
        ],
        "created_at": timestamp,
        "updated_at": timestamp,
    }


def generate_timeline(rng: random.Random, candidates: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    One applied entry per candidate, one stage_change per stage reached (in pipeline
    order) and, for about half of them, a free-form note.
    """
    entries = []
    for candidate in candidates:
        cid = candidate["id"]
        applied_at = datetime.datetime.fromisoformat(candidate["created_at"])
        history = [{
            "id": f"{cid}-initial",
            "candidate_id": cid,
            "action": TimelineAction.STAGE_CHANGE.value,
            "from_stage": None,
            "to_stage": "applied",
            "timestamp": candidate["created_at"],
            "notes": "Candidate applied for the position",
        }]

        moment = applied_at
        for step in range(1, STAGE_ORDER.index(candidate["stage"]) + 1):
            to_stage = STAGE_ORDER[step]
            # Each stage lands one to eight days after the previous one
            moment = moment + DAY + rng.random() * 7 * DAY
            history.append({
                "id": f"{cid}-{step}",
                "candidate_id": cid,
                "action": TimelineAction.STAGE_CHANGE.value,
                "from_stage": STAGE_ORDER[step - 1],
                "to_stage": to_stage,
                "timestamp": _iso(moment),
                "notes": rng.choice(STAGE_NOTES).format(to_stage),
            })

        if rng.random() > 0.5:
            history.append({
                "id": f"{cid}-note",
                "candidate_id": cid,
                "action": TimelineAction.NOTE_ADDED.value,
                "from_stage": None,
                "to_stage": None,
                "timestamp": _iso(applied_at + rng.random() * 30 * DAY),
                "notes": rng.choice(RANDOM_NOTES),
            })

        entries.extend(sorted(history, key=lambda e: datetime.datetime.fromisoformat(e["timestamp"])))
    return entries


def generate_seed_data(
    rng: Optional[random.Random] = None,
    now: Optional[datetime.datetime] = None,
    job_count: int = 25,
    candidate_count: int = 1000,
) -> Dict[str, List[Dict[str, Any]]]:
    rng = rng or random.Random()
    now = now or datetime.datetime.now(datetime.timezone.utc)

    jobs = generate_jobs(rng, now, job_count)
    candidates = generate_candidates(rng, now, jobs, candidate_count)
    assessments = [build_assessment(job, _iso(now)) for job in jobs[:3]]
    return {
        "jobs": jobs,
        "candidates": candidates,
        "assessments": assessments,
        "timeline": generate_timeline(rng, candidates),
        "responses": [],
    }

"""
Result shaping for the global search box (jobs, candidates and assessments).
"""
from typing import Any, Dict, Optional


def job_result(job: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": job["id"],
        "title": job["title"],
        "type": "job",
        "description": f"{job.get('location') or 'N/A'} • {job.get('type') or 'N/A'}",
        "url": f"/jobs/{job['id']}",
    }


def candidate_result(candidate: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": candidate["id"],
        "title": candidate["name"],
        "type": "candidate",
        "description": f"{candidate['email']} • {candidate['stage']}",
        "url": f"/candidates/{candidate['id']}",
    }


def assessment_result(
    job: Dict[str, Any], assessment: Optional[Dict[str, Any]], query: str
) -> Optional[Dict[str, Any]]:
    """A result when the assessment title or description contains the query, else None."""
    if not assessment:
        return None
    needle = query.lower()
    title = assessment.get("title") or ""
    description = assessment.get("description") or ""
    if needle not in title.lower() and needle not in description.lower():
        return None
    return {
        "id": assessment["id"],
        "title": title,
        "type": "assessment",
        "description": f"{job['title']} • {len(assessment.get('sections') or [])} sections",
        "url": f"/assessments/{job['id']}/builder",
    }

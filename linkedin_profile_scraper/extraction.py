from typing import List, Optional, Tuple

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from .errors import ExtractionFailure
from .models import (
    Education,
    Experience,
    Profile,
    RawEducation,
    RawExperience,
    RawProfile,
    RawSkill,
    RawVolunteering,
    Skill,
    Volunteering,
)
from .normalize import (
    format_date,
    get_clean_text,
    get_duration_in_days,
    get_location_from_text,
    get_ongoing_duration_in_days,
    looks_like_date_range,
    parse_endorsement_count,
    split_date_range,
)
from .selectors import (
    DETAIL_ITEM_SELECTOR,
    ENTITY_LIST_SCRIPT,
    PROFILE_SCRIPT,
    VOLUNTEERING_ITEM_SELECTOR,
)

EMPLOYMENT_TYPES = {
    "full-time",
    "part-time",
    "self-employed",
    "freelance",
    "contract",
    "internship",
    "apprenticeship",
    "seasonal",
    "temporary",
}
_WORK_MODES = ("remote", "hybrid", "on-site")


async def _evaluate(page: Page, section: str, script: str, arg=None):
    try:
        if arg is None:
            return await page.evaluate(script)
        return await page.evaluate(script, arg)
    except PlaywrightError as e:
        raise ExtractionFailure(section, str(e)) from e


async def _list_items(page: Page, section: str, selector: str) -> List[List[str]]:
    items = await _evaluate(page, section, ENTITY_LIST_SCRIPT, selector) or []
    return [[t for t in (item.get("texts") or []) if t] for item in items]


def _split_company_line(line: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """"Acme · Full-time" -> ("Acme", "Full-time")."""
    clean = get_clean_text(line)
    if not clean:
        return None, None
    parts = [p.strip() for p in clean.split("·")]
    if parts[-1].lower() in EMPLOYMENT_TYPES:
        company = " · ".join(parts[:-1]) or None
        return company, parts[-1]
    return clean, None


def _looks_like_location(text: str) -> bool:
    clean = get_clean_text(text) or ""
    if not clean or len(clean) > 80:
        return False
    last = clean.split("·")[-1].strip().lower()
    return "," in clean or last in _WORK_MODES or clean.endswith(" Area")


def _first_date_index(texts: List[str]) -> Optional[int]:
    return next((i for i, t in enumerate(texts) if looks_like_date_range(t)), None)


def _description(texts: List[str]) -> Optional[str]:
    for t in texts:
        if not t.lower().startswith("skills:"):
            return t
    return None


def parse_experience_item(texts: List[str]) -> RawExperience:
    """Map the spans of one experience entry to its fields.

    Layout: title, "Company · Employment type", date range, optional
    location, optional description.
    """
    if not texts:
        return RawExperience()
    rest = texts[1:]
    date_idx = _first_date_index(rest)
    head = rest[:date_idx] if date_idx is not None else rest[:1]
    company, employment_type = _split_company_line(head[0]) if head else (None, None)

    start = end = None
    present = False
    if date_idx is not None:
        start, end, present = split_date_range(rest[date_idx])
        tail = rest[date_idx + 1:]
    else:
        tail = rest[1:]

    location = None
    if tail and _looks_like_location(tail[0]):
        location, tail = tail[0], tail[1:]

    return RawExperience(
        title=texts[0],
        company=company,
        employment_type=employment_type,
        location=location,
        start_date=start,
        end_date=end,
        end_date_is_present=present,
        description=_description(tail),
    )


def parse_education_item(texts: List[str]) -> RawEducation:
    """School, "Degree, Field of study", date range."""
    if not texts:
        return RawEducation()
    rest = texts[1:]
    date_idx = _first_date_index(rest)
    head = rest[:date_idx] if date_idx is not None else rest[:1]

    degree = field = None
    if head:
        degree_line = get_clean_text(head[0]) or ""
        degree, _, field = degree_line.partition(", ")

    start = end = None
    if date_idx is not None:
        start, end, _ = split_date_range(rest[date_idx])

    return RawEducation(
        school_name=texts[0],
        degree_name=degree or None,
        field_of_study=field or None,
        start_date=start,
        end_date=end,
    )


def parse_volunteering_item(texts: List[str]) -> RawVolunteering:
    """Role, organization, date range, optional cause, optional description."""
    if not texts:
        return RawVolunteering()
    rest = texts[1:]
    date_idx = _first_date_index(rest)
    head = rest[:date_idx] if date_idx is not None else rest[:1]

    start = end = None
    present = False
    if date_idx is not None:
        start, end, present = split_date_range(rest[date_idx])
        tail = rest[date_idx + 1:]
    else:
        tail = rest[1:]

    # A short cause label ("Education") may sit between dates and description.
    description = next((t for t in tail if len(t) > 40), None)
    return RawVolunteering(
        title=texts[0],
        company=head[0] if head else None,
        start_date=start,
        end_date=end,
        end_date_is_present=present,
        description=description,
    )


def parse_skill_item(texts: List[str]) -> RawSkill:
    if not texts:
        return RawSkill()
    endorsements = next((t for t in texts[1:] if "endorsement" in t.lower()), None)
    return RawSkill(skill_name=texts[0], endorsements=endorsements)


def build_profile(raw: RawProfile) -> Profile:
    return Profile(
        full_name=get_clean_text(raw.full_name),
        title=get_clean_text(raw.title),
        location=get_location_from_text(raw.location),
        photo=raw.photo or None,
        description=get_clean_text(raw.description),
        url=raw.url,
    )


def build_experience(raw: RawExperience) -> Experience:
    start = format_date(raw.start_date)
    end = None if raw.end_date_is_present else format_date(raw.end_date)
    if raw.end_date_is_present:
        duration = get_ongoing_duration_in_days(start)
    else:
        duration = get_duration_in_days(start, end)
    return Experience(
        title=get_clean_text(raw.title),
        company=get_clean_text(raw.company),
        employment_type=get_clean_text(raw.employment_type),
        location=get_location_from_text(raw.location),
        start_date=start,
        end_date=end,
        end_date_is_present=raw.end_date_is_present,
        duration_in_days=duration,
        description=get_clean_text(raw.description),
    )


def build_education(raw: RawEducation) -> Education:
    start = format_date(raw.start_date)
    end = format_date(raw.end_date)
    return Education(
        school_name=get_clean_text(raw.school_name),
        degree_name=get_clean_text(raw.degree_name),
        field_of_study=get_clean_text(raw.field_of_study),
        start_date=start,
        end_date=end,
        duration_in_days=get_duration_in_days(start, end),
    )


def build_volunteering(raw: RawVolunteering) -> Volunteering:
    start = format_date(raw.start_date)
    end = None if raw.end_date_is_present else format_date(raw.end_date)
    if raw.end_date_is_present:
        duration = get_ongoing_duration_in_days(start)
    else:
        duration = get_duration_in_days(start, end)
    return Volunteering(
        title=get_clean_text(raw.title),
        company=get_clean_text(raw.company),
        start_date=start,
        end_date=end,
        end_date_is_present=raw.end_date_is_present,
        duration_in_days=duration,
        description=get_clean_text(raw.description),
    )


def build_skills(raws: List[RawSkill]) -> List[Skill]:
    """Clean skills, dropping repeats (the skills page lists some twice)."""
    skills: List[Skill] = []
    seen = set()
    for raw in raws:
        name = get_clean_text(raw.skill_name)
        if not name or name in seen:
            continue
        seen.add(name)
        skills.append(Skill(skill_name=name, endorsement_count=parse_endorsement_count(raw.endorsements)))
    return skills


async def get_profile(page: Page) -> Profile:
    data = await _evaluate(page, "profile", PROFILE_SCRIPT) or {}
    data["url"] = data.get("url") or page.url
    return build_profile(RawProfile(**data))


async def get_volunteering(page: Page) -> List[Volunteering]:
    items = await _list_items(page, "volunteering", VOLUNTEERING_ITEM_SELECTOR)
    return [build_volunteering(parse_volunteering_item(texts)) for texts in items if texts]


async def get_experiences(page: Page) -> List[Experience]:
    items = await _list_items(page, "experience", DETAIL_ITEM_SELECTOR)
    return [build_experience(parse_experience_item(texts)) for texts in items if texts]


async def get_education(page: Page) -> List[Education]:
    items = await _list_items(page, "education", DETAIL_ITEM_SELECTOR)
    return [build_education(parse_education_item(texts)) for texts in items if texts]


async def get_skills(page: Page) -> List[Skill]:
    items = await _list_items(page, "skills", DETAIL_ITEM_SELECTOR)
    return build_skills([parse_skill_item(texts) for texts in items if texts])

from datetime import date

import pytest
from playwright.async_api import Error as PlaywrightError

from linkedin_profile_scraper import extraction
from linkedin_profile_scraper.errors import ExtractionFailure
from linkedin_profile_scraper.models import RawExperience
from linkedin_profile_scraper.selectors import ENTITY_LIST_SCRIPT, PROFILE_SCRIPT


def test_parse_experience_item_full_entry():
    raw = extraction.parse_experience_item([
        "Staff Engineer",
        "Globex · Contract",
        "Feb 2021 – Present · 2 yrs",
        "Springfield, Oregon, United States · On-site",
        "Skills: Python · Go",
    ])
    assert raw.title == "Staff Engineer"
    assert raw.company == "Globex"
    assert raw.employment_type == "Contract"
    assert raw.start_date == "Feb 2021"
    assert raw.end_date is None
    assert raw.end_date_is_present is True
    assert raw.location.startswith("Springfield")
    assert raw.description is None


def test_parse_experience_item_without_dates_or_location():
    raw = extraction.parse_experience_item(["Founder", "Side Project"])
    assert raw == RawExperience(title="Founder", company="Side Project")


def test_parse_education_item():
    raw = extraction.parse_education_item(["MIT", "Bachelor of Science - BS, Physics", "2010 - 2014", "Grade: A"])
    assert raw.school_name == "MIT"
    assert raw.degree_name == "Bachelor of Science - BS"
    assert raw.field_of_study == "Physics"
    assert (raw.start_date, raw.end_date) == ("2010", "2014")


def test_parse_education_item_school_only():
    raw = extraction.parse_education_item(["Some School", "2001 - 2005"])
    assert raw.degree_name is None
    assert raw.start_date == "2001"


def test_parse_volunteering_item():
    raw = extraction.parse_volunteering_item([
        "Mentor",
        "Code Club",
        "Sep 2019 - Present · 5 yrs",
        "Education",
        "Teaching kids to program on Saturday mornings at the local library.",
    ])
    assert raw.title == "Mentor"
    assert raw.company == "Code Club"
    assert raw.end_date_is_present is True
    assert raw.description.startswith("Teaching kids")


def test_build_skills_drops_duplicates():
    raws = [extraction.parse_skill_item(t) for t in (["Python", "5 endorsements"], ["Python"], ["SQL"])]
    skills = extraction.build_skills(raws)
    assert [(s.skill_name, s.endorsement_count) for s in skills] == [("Python", 5), ("SQL", 0)]


def test_build_experience_with_unparsable_dates():
    experience = extraction.build_experience(RawExperience(title="X", start_date="sometime", end_date="later"))
    assert experience.start_date is None
    assert experience.duration_in_days is None


def test_build_education_durations():
    raw = extraction.parse_education_item(["Delft", "MSc, CS", "Sep 2014 - Aug 2016"])
    education = extraction.build_education(raw)
    assert education.start_date == date(2014, 9, 1)
    assert education.end_date == date(2016, 8, 1)
    assert education.duration_in_days == (date(2016, 8, 1) - date(2014, 9, 1)).days


class SnapshotPage:
    url = "https://www.linkedin.com/in/jane/details/experience/"

    def __init__(self, profile=None, items=None, error=None):
        self.profile = profile
        self.items = items or []
        self.error = error
        self.calls = []

    async def evaluate(self, script, arg=None):
        self.calls.append((script, arg))
        if self.error:
            raise self.error
        if script == PROFILE_SCRIPT:
            return self.profile
        if script == ENTITY_LIST_SCRIPT:
            return [{"texts": texts} for texts in self.items]
        raise AssertionError("unexpected script")


async def test_get_profile_cleans_fields():
    page = SnapshotPage(profile={
        "full_name": " Jane\nDoe ",
        "title": "Engineer  at Acme",
        "location": "Berlin, Germany",
        "photo": "",
        "description": "  Hi  there ",
        "url": "https://www.linkedin.com/in/jane/",
    })
    profile = await extraction.get_profile(page)
    assert profile.full_name == "Jane Doe"
    assert profile.title == "Engineer at Acme"
    assert profile.location.country == "Germany"
    assert profile.photo is None
    assert profile.description == "Hi there"


async def test_get_profile_with_empty_snapshot_uses_page_url():
    profile = await extraction.get_profile(SnapshotPage(profile=None))
    assert profile.full_name is None
    assert profile.url == SnapshotPage.url


async def test_get_experiences_skips_empty_items():
    page = SnapshotPage(items=[["Engineer", "Acme", "2019 - 2020"], []])
    experiences = await extraction.get_experiences(page)
    assert len(experiences) == 1
    assert experiences[0].duration_in_days == 365
    assert page.calls[0][1] == extraction.DETAIL_ITEM_SELECTOR


async def test_get_volunteering_empty_section():
    assert await extraction.get_volunteering(SnapshotPage(items=[])) == []


async def test_evaluate_error_becomes_extraction_failure():
    page = SnapshotPage(error=PlaywrightError("Execution context was destroyed"))
    with pytest.raises(ExtractionFailure) as excinfo:
        await extraction.get_skills(page)
    assert excinfo.value.section == "skills"

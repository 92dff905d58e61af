from datetime import date
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .config import DEFAULT_TIMEOUT_MS, DEFAULT_USER_AGENT
from .errors import ConfigurationError

_TYPE_NAMES = {
    "session_cookie_value": "a string",
    "user_agent": "a string",
    "keep_alive": "a boolean",
    "timeout": "a positive number",
    "headless": "a boolean",
}


class ScraperOptions(BaseModel):
    """Immutable scraper configuration, validated once at construction.

    Field order is the validation order: the first failing field is the one
    reported in the ConfigurationError.
    """
    model_config = ConfigDict(frozen=True, strict=True, extra="forbid")

    session_cookie_value: str = Field(min_length=1)
    user_agent: str = DEFAULT_USER_AGENT
    keep_alive: bool = False
    timeout: int = Field(default=DEFAULT_TIMEOUT_MS, gt=0)
    headless: bool = True

    @classmethod
    def from_user_options(cls, **options) -> "ScraperOptions":
        """Build options from user input, mapping failures to ConfigurationError.

        Options passed as None fall back to their defaults.
        """
        prefix = "Error during setup."
        if not options.get("session_cookie_value"):
            raise ConfigurationError(f'{prefix} Option "session_cookie_value" is required.')
        supplied = {k: v for k, v in options.items() if v is not None}
        try:
            return cls(**supplied)
        except ValidationError as e:
            first = e.errors()[0]
            field = str(first["loc"][0]) if first["loc"] else "options"
            if first["type"] == "extra_forbidden":
                raise ConfigurationError(f'{prefix} Unknown option "{field}".') from None
            expected = _TYPE_NAMES.get(field, "valid")
            raise ConfigurationError(f'{prefix} Option "{field}" needs to be {expected}.') from None

    def redacted(self) -> dict:
        """Options as a dict safe to log: the session token is masked."""
        data = self.model_dump()
        token = data["session_cookie_value"]
        data["session_cookie_value"] = f"{token[:4]}…" if len(token) > 4 else "…"
        return data


class Location(BaseModel):
    model_config = ConfigDict(frozen=True)

    city: Optional[str] = None
    province: Optional[str] = None
    country: Optional[str] = None


class RawProfile(BaseModel):
    """Profile fields as read from the top card, before cleaning."""
    full_name: Optional[str] = None
    title: Optional[str] = None
    location: Optional[str] = None
    photo: Optional[str] = None
    description: Optional[str] = None
    url: str = ""


class RawExperience(BaseModel):
    title: Optional[str] = None
    company: Optional[str] = None
    employment_type: Optional[str] = None
    location: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    end_date_is_present: bool = False
    description: Optional[str] = None


class RawEducation(BaseModel):
    school_name: Optional[str] = None
    degree_name: Optional[str] = None
    field_of_study: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None


class RawVolunteering(BaseModel):
    title: Optional[str] = None
    company: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    end_date_is_present: bool = False
    description: Optional[str] = None


class RawSkill(BaseModel):
    skill_name: Optional[str] = None
    endorsements: Optional[str] = None


class Profile(BaseModel):
    model_config = ConfigDict(frozen=True)

    full_name: Optional[str] = None
    title: Optional[str] = None
    location: Optional[Location] = None
    photo: Optional[str] = None
    description: Optional[str] = None
    url: str


class Experience(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: Optional[str] = None
    company: Optional[str] = None
    employment_type: Optional[str] = None
    location: Optional[Location] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    end_date_is_present: bool = False
    duration_in_days: Optional[int] = Field(default=None, ge=0)
    description: Optional[str] = None


class Education(BaseModel):
    model_config = ConfigDict(frozen=True)

    school_name: Optional[str] = None
    degree_name: Optional[str] = None
    field_of_study: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    duration_in_days: Optional[int] = Field(default=None, ge=0)


class Volunteering(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: Optional[str] = None
    company: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    end_date_is_present: bool = False
    duration_in_days: Optional[int] = Field(default=None, ge=0)
    description: Optional[str] = None


class Skill(BaseModel):
    model_config = ConfigDict(frozen=True)

    skill_name: Optional[str] = None
    endorsement_count: int = 0


class ScrapeResult(BaseModel):
    """Aggregate of one profile run, immutable once built. Sequences keep
    the order of the page."""
    model_config = ConfigDict(frozen=True)

    profile: Profile
    experiences: Tuple[Experience, ...]
    education: Tuple[Education, ...]
    volunteering: Tuple[Volunteering, ...]
    skills: Tuple[Skill, ...]


class ProfileRequest(BaseModel):
    """Payload of the HTTP scrape endpoint."""
    url: str

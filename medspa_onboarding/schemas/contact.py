from pydantic import BaseModel


class SocialLinks(BaseModel):
    instagram: str | None = None
    facebook: str | None = None
    tiktok: str | None = None
    youtube: str | None = None
    twitter: str | None = None


class ContactInfo(BaseModel):
    emails: list[str] | None = None
    phones: list[str] | None = None
    addresses: list[str] | None = None
    social: SocialLinks | None = None
    bookingLinks: list[str] | None = None
    contactPage: str | None = None
    hours: list[str] | None = None
    mapsLink: str | None = None

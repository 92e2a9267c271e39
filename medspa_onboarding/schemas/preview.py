from pydantic import BaseModel


class PreviewColors(BaseModel):
    primary: str | None = None
    secondary: str | None = None
    accent: str | None = None
    background: str | None = None
    text: str | None = None


class PreviewHero(BaseModel):
    title: str | None = None
    subtitle: str | None = None
    image: str | None = None
    ctaText: str | None = None


class NavigationItem(BaseModel):
    label: str = ""
    href: str = ""


class PreviewSection(BaseModel):
    type: str = "features"  # features | services | testimonials | about
    title: str | None = None
    content: str | None = None
    images: list[str] | None = None


class PreviewFonts(BaseModel):
    heading: str | None = None
    body: str | None = None


class PreviewBrandStyle(BaseModel):
    tone: str | None = None
    aesthetic: str | None = None


class PreviewData(BaseModel):
    """Visual data used to render a business's preview landing page."""

    logo: str | None = None
    colors: PreviewColors = PreviewColors()
    hero: PreviewHero = PreviewHero()
    navigation: list[NavigationItem] = []
    sections: list[PreviewSection] = []
    images: list[str] = []
    fonts: PreviewFonts | None = None
    brandStyle: PreviewBrandStyle | None = None

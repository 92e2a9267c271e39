from pydantic import BaseModel


class CrawlProgress(BaseModel):
    pagesScraped: int = 0


class CrawlJob(BaseModel):
    jobId: str
    pollUrl: str
    status: str = "pending"  # pending | scraping | running | completed | failed
    progress: CrawlProgress | None = None


class CrawlPage(BaseModel):
    url: str = ""
    rawHtml: str = ""
    rawText: str = ""
    metadata: dict = {}


class CanonicalCrawlResult(BaseModel):
    rawHtml: str = ""
    rawText: str = ""
    pages: list[CrawlPage] = []
    metadata: dict = {}

    @property
    def has_content(self) -> bool:
        if self.rawHtml or self.rawText:
            return True
        return any(p.rawHtml or p.rawText for p in self.pages)


class PageScrape(BaseModel):
    """Single-page scrape of a site's landing page."""

    url: str = ""
    markdown: str = ""
    rawHtml: str = ""
    links: list[str] = []
    images: list[str] = []
    metadata: dict = {}

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROJECT_NAME: str = "SiteGraph"
    VERSION: str = "0.1.0"

    LOG_LEVEL: str = "INFO"

    # Crawl defaults (overridable per call via CrawlOptions)
    CRAWL_MAX_DEPTH: int = 3
    CRAWL_MAX_PAGES: int = 30
    CRAWL_DELAY_MS: int = 500
    CRAWL_FAST_DELAY_MS: int = 100
    CRAWL_PAGE_TIMEOUT_MS: int = 30000

    # Renderer: "playwright" for headless browser, "http" for plain httpx fetch
    RENDERER: str = "playwright"
    USER_AGENT: str = "SiteGraphBot/0.1 (+internal link analyzer)"

    # Playwright browser options
    BROWSER_TYPE: str = "chromium"  # chromium, firefox, webkit
    BROWSER_HEADLESS: bool = True
    BROWSER_WAIT_UNTIL: str = "networkidle"  # load, domcontentloaded, networkidle
    BROWSER_VIEWPORT_WIDTH: int = 1920
    BROWSER_VIEWPORT_HEIGHT: int = 1080
    BROWSER_IGNORE_HTTPS_ERRORS: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()

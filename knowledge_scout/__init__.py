"""Heuristic company-website scraper producing structured knowledge records."""
from .models import KnowledgeRecord, ScrapeOutcome, ScraperSettings
from .pipeline import KnowledgeScraper, scrape

__all__ = ['KnowledgeRecord', 'ScrapeOutcome', 'ScraperSettings', 'KnowledgeScraper', 'scrape']

"""
Crawl, graph and scoring services.
"""

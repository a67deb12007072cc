"""
Core resolution engine.

The `PipelineOrchestrator` takes one search term through metadata scraping,
YouTube search, matching and download. The `QueryRunner` feeds it several
terms in sequence and keeps one term's failure from stopping the rest.
"""

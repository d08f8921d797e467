"""
HTTP surface for the listing scraper.
"""

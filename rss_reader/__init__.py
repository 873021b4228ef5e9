"""Fetch an RSS feed and print a readable summary of its items."""

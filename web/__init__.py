"""Hoàn Hảo web front logic.

This package holds everything the page routes need besides the backend
client: form validation, session and cookie handling, localization,
pagination, view models for the feed, and toast notifications.
"""

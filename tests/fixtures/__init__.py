"""Test fixtures for the Hoàn Hảo web front.

- backend: A fake backend gateway behind ``httpx.MockTransport`` and the
  app clients that talk to it.
"""

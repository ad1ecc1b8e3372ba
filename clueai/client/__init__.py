"""
clueai/client/__init__.py

Client core: everything the browser page did between the text boxes and
the Assist API, without the page itself.

This package contains:
  - locator.py: parses the LINES/NOTE reply into padded line ranges.
  - highlight.py: classifies each editor line as hit / context / none.
  - storage.py, history.py, preferences.py: injected persistence for the
    capped history log and the theme preference.
  - api_client.py: httpx client for /extract, /help and /help/locate.
  - orchestrator.py: the submission workflow and working state.
"""

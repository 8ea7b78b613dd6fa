from __future__ import annotations

"""
Community record privacy.

This package provides:
- the privacy policy value and its conservative defaults
- the community record model
- policy-driven redaction/anonymization, plus log-safe record summaries

No cryptography lives here; see hearth.core.crypto.
"""

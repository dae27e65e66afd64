from __future__ import annotations

import hashlib
import re

STABLE_ID_LENGTH = 12


def create_stable_id(value: str, length: int = STABLE_ID_LENGTH) -> str:
    """Compute a deterministic lowercase hex id for ``value``.

    _id = sha1(<value>)[:length]
    The default 12 hex characters (48 bits) match existing catalog snapshots.
    """

    digest = hashlib.sha1(value.encode("utf-8")).hexdigest()
    return digest[:length]


def material_fingerprint(
    subject_code: str,
    source_html: str,
    title: str,
    term_date_label: str | None = None,
) -> str:
    """Join the identity fields of a material item into its fingerprint.

    <subject-code>|<source-html>|<title>|<term-date-label or empty>
    """

    return "|".join([subject_code, source_html, title, term_date_label or ""])


def slugify(text: str) -> str:
    s = re.sub(r"[^a-z0-9]+", "-", text.lower())
    return s.strip("-")
